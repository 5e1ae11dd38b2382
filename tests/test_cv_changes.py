"""연속된 CV 스냅샷 비교로 만들어지는 변경 내역 문장을 검증하는 테스트입니다."""

from datetime import datetime

from cv_manager.services.history_service import build_change_log, diff_snapshots


def _snapshot(version, created_at, **fields):
    return {"version_number": version, "created_at": created_at, **fields}


def test_identical_snapshots_produce_no_changes():
    snap = {"full_name": "Kim", "publications_research": [{"title": "P1", "year": "2021"}]}
    assert diff_snapshots(snap, dict(snap)) == []


def test_scalar_change_message():
    assert diff_snapshots({"full_name": "X"}, {"full_name": "Y"}) == ['Updated full name from "X" to "Y"']


def test_missing_scalar_is_treated_as_empty():
    assert diff_snapshots({"phone": None}, {}) == []
    assert diff_snapshots({}, {"phone": "010"}) == ['Updated phone from "" to "010"']


def test_added_and_removed_items():
    previous = {"education": [{"degree": "PhD", "institution": "KAIST"}]}
    current = {"publications_research": [{"title": "P2", "year": "2023"}]}

    assert diff_snapshots(previous, current) == [
        "Removed Education: PhD - KAIST",
        "Added Publications (Research): P2",
    ]


def test_updated_item_lists_changed_fields():
    previous = {"publications_research": [{"title": "P1", "year": "2021", "index": ""}]}
    current = {"publications_research": [{"title": "P1", "year": "2022", "index": "SSCI"}]}

    changes = diff_snapshots(previous, current)

    assert changes == [
        'Updated Publications (Research) (P1 (SSCI)) — index: "" → "SSCI"; year: "2021" → "2022"'
    ]


def test_course_sections_are_compared():
    previous = {"courses": [{"course": "Strategy", "institution": "Gachon", "credit_hours": "3"}]}
    current = {"courses": []}
    assert diff_snapshots(previous, current) == ["Removed Courses (Credit Hours): Strategy - Gachon (3 credits)"]


def test_insertion_at_front_is_reported_positionally():
    previous = {"professional_service": [{"role": "Reviewer"}]}
    current = {"professional_service": [{"role": "Editor"}, {"role": "Reviewer"}]}

    changes = diff_snapshots(previous, current)

    assert changes == [
        'Updated Professional Service (Editor) — role: "Reviewer" → "Editor"',
        "Added Professional Service: Reviewer",
    ]


def test_change_log_needs_two_snapshots():
    assert build_change_log([]) == []
    assert build_change_log([_snapshot(1, datetime(2024, 1, 1), full_name="A")]) == []


def test_change_log_is_newest_first_and_sorted_by_version():
    v1 = _snapshot(1, datetime(2024, 1, 1), full_name="A")
    v2 = _snapshot(2, datetime(2024, 2, 1), full_name="B")
    v3 = _snapshot(3, datetime(2024, 3, 1), full_name="B", teaching=[{"course": "Marketing", "institution": "Gachon"}])

    log = build_change_log([v3, v1, v2])

    assert [entry["description"] for entry in log] == [
        "Added Teaching: Marketing - Gachon",
        'Updated full name from "A" to "B"',
    ]
    assert log[0]["created_at"] == datetime(2024, 3, 1)
    assert log[1]["created_at"] == datetime(2024, 2, 1)


def test_changes_in_one_save_keep_generation_order():
    v1 = _snapshot(1, datetime(2024, 1, 1), full_name="A", email="a@x")
    v2 = _snapshot(2, datetime(2024, 1, 2), full_name="B", email="b@x")

    log = build_change_log([v1, v2])

    assert [entry["description"] for entry in log] == [
        'Updated full name from "A" to "B"',
        'Updated email from "a@x" to "b@x"',
    ]
