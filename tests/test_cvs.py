import copy

import pytest
from sqlalchemy.exc import IntegrityError

from cv_manager.config import settings
from cv_manager.models.cv_history import CVHistory
from tests.conftest import auth_headers, SAMPLE_CV, save_cv


def test_get_my_cv_before_saving(client, seed_users):
    resp = client.get("/api/cv/me", headers=auth_headers(client, "prof@univ.ac.kr"))
    assert resp.status_code == 404


def test_save_cv_creates_versions(client, seed_users):
    first = save_cv(client, "prof@univ.ac.kr", SAMPLE_CV)
    assert first["version_number"] == 1
    assert first["cv"]["full_name"] == "Professor Kim"
    assert len(first["cv"]["academic_employment"]) == 2

    updated = copy.deepcopy(SAMPLE_CV)
    updated["full_name"] = "Professor Kim Jr."
    second = save_cv(client, "prof@univ.ac.kr", updated)
    assert second["version_number"] == 2
    assert second["cv"]["cv_id"] == first["cv"]["cv_id"]

    resp = client.get("/api/cv/me", headers=auth_headers(client, "prof@univ.ac.kr"))
    assert resp.status_code == 200
    assert resp.json()["full_name"] == "Professor Kim Jr."


def test_save_cv_defaults_email_to_account(client, seed_users):
    payload = copy.deepcopy(SAMPLE_CV)
    payload["email"] = None
    result = save_cv(client, "prof@univ.ac.kr", payload)
    assert result["cv"]["email"] == "prof@univ.ac.kr"


def test_owner_and_admin_can_view_cv_but_others_cannot(client, seed_users):
    cv_id = save_cv(client, "prof@univ.ac.kr", SAMPLE_CV)["cv"]["cv_id"]

    resp = client.get(f"/api/cvs/{cv_id}", headers=auth_headers(client, "prof@univ.ac.kr"))
    assert resp.status_code == 200
    resp = client.get(f"/api/cvs/{cv_id}", headers=auth_headers(client, "admin@univ.ac.kr"))
    assert resp.status_code == 200
    resp = client.get(f"/api/cvs/{cv_id}", headers=auth_headers(client, "prof2@univ.ac.kr"))
    assert resp.status_code == 403
    resp = client.get("/api/cvs/9999", headers=auth_headers(client, "admin@univ.ac.kr"))
    assert resp.status_code == 404


def test_get_cv_with_year_filter(client, seed_users):
    cv_id = save_cv(client, "prof@univ.ac.kr", SAMPLE_CV)["cv"]["cv_id"]
    headers = auth_headers(client, "admin@univ.ac.kr")

    resp = client.get(f"/api/cvs/{cv_id}?year_from=2020&year_to=2021", headers=headers)
    assert resp.status_code == 200
    data = resp.json()
    assert len(data["education"]) == 1
    assert [item["position"] for item in data["academic_employment"]] == ["Professor"]
    assert data["teaching"] == []
    assert len(data["publications_research"]) == 1
    assert data["professional_service"] == []

    resp = client.get(f"/api/cvs/{cv_id}?year_from=twenty", headers=headers)
    assert resp.status_code == 400


def test_cv_scores_endpoint(client, seed_users):
    cv_id = save_cv(client, "prof@univ.ac.kr", SAMPLE_CV)["cv"]["cv_id"]

    resp = client.get(f"/api/cvs/{cv_id}/scores", headers=auth_headers(client, "admin@univ.ac.kr"))
    assert resp.status_code == 200
    data = resp.json()
    assert data["cv_id"] == cv_id
    assert data["course_score"] == 3
    assert data["intellectual_score"] == 0
    assert data["total_points"] == 3

    resp = client.get("/api/cv/me/scores?year_from=2022", headers=auth_headers(client, "prof@univ.ac.kr"))
    assert resp.status_code == 200
    assert resp.json()["course_score"] == 0


def test_list_cvs_requires_admin(client, seed_users):
    resp = client.get("/api/cvs", headers=auth_headers(client, "prof@univ.ac.kr"))
    assert resp.status_code == 403


def test_list_and_search_cvs(client, seed_users):
    save_cv(client, "prof@univ.ac.kr", SAMPLE_CV)
    other = copy.deepcopy(SAMPLE_CV)
    other["full_name"] = "Professor Lee"
    other["email"] = "prof2@univ.ac.kr"
    save_cv(client, "prof2@univ.ac.kr", other)
    headers = auth_headers(client, "admin@univ.ac.kr")

    resp = client.get("/api/cvs", headers=headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["total_count"] == 2
    assert data["page"] == 1
    assert data["total_pages"] == 1
    assert {item["full_name"] for item in data["items"]} == {"Professor Kim", "Professor Lee"}
    assert data["items"][0]["section_counts"]["academic_employment"] == 2

    resp = client.get("/api/cvs?search=lee", headers=headers)
    data = resp.json()
    assert data["total_count"] == 1
    assert data["items"][0]["email"] == "prof2@univ.ac.kr"

    resp = client.get("/api/cvs?search=nobody", headers=headers)
    assert resp.json()["total_count"] == 0
    assert resp.json()["items"] == []


def test_list_cvs_pagination(client, seed_users, monkeypatch):
    monkeypatch.setattr(settings, "CV_LIST_PAGE_SIZE", 1)
    save_cv(client, "prof@univ.ac.kr", SAMPLE_CV)
    save_cv(client, "prof2@univ.ac.kr", SAMPLE_CV)
    headers = auth_headers(client, "admin@univ.ac.kr")

    first = client.get("/api/cvs?page=1", headers=headers).json()
    second = client.get("/api/cvs?page=2", headers=headers).json()
    assert first["total_pages"] == 2
    assert len(first["items"]) == 1
    assert len(second["items"]) == 1
    assert first["items"][0]["cv_id"] != second["items"][0]["cv_id"]

    resp = client.get("/api/cvs?page=0", headers=headers)
    assert resp.status_code == 400


def test_export_csv(client, seed_users):
    save_cv(client, "prof@univ.ac.kr", SAMPLE_CV)
    resp = client.get("/api/cvs/export.csv", headers=auth_headers(client, "admin@univ.ac.kr"))
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/csv")
    lines = resp.text.strip().splitlines()
    assert lines[0].startswith("cv_id,full_name,email,phone,intellectual_score")
    assert len(lines) == 2
    assert "Professor Kim" in lines[1]

    resp = client.get("/api/cvs/export.csv", headers=auth_headers(client, "prof@univ.ac.kr"))
    assert resp.status_code == 403


def test_history_and_version_lookup(client, seed_users):
    cv_id = save_cv(client, "prof@univ.ac.kr", SAMPLE_CV)["cv"]["cv_id"]
    updated = copy.deepcopy(SAMPLE_CV)
    updated["phone"] = "010-0000-0000"
    save_cv(client, "prof@univ.ac.kr", updated)
    headers = auth_headers(client, "prof@univ.ac.kr")

    resp = client.get(f"/api/cvs/{cv_id}/history", headers=headers)
    assert resp.status_code == 200
    versions = resp.json()
    assert [v["version_number"] for v in versions] == [2, 1]
    assert versions[0]["snapshot"]["phone"] == "010-0000-0000"

    resp = client.get(f"/api/cvs/{cv_id}/history/1", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["snapshot"]["phone"] == "010-1234-5678"

    resp = client.get(f"/api/cvs/{cv_id}/history/9", headers=headers)
    assert resp.status_code == 404


def test_changes_endpoint(client, seed_users):
    cv_id = save_cv(client, "prof@univ.ac.kr", SAMPLE_CV)["cv"]["cv_id"]
    updated = copy.deepcopy(SAMPLE_CV)
    updated["full_name"] = "Kim Minsu"
    updated["publications_books"] = [{"title": "Marketing 101", "year": "2023"}]
    save_cv(client, "prof@univ.ac.kr", updated)

    resp = client.get(f"/api/cvs/{cv_id}/changes", headers=auth_headers(client, "admin@univ.ac.kr"))
    assert resp.status_code == 200
    descriptions = [entry["description"] for entry in resp.json()]
    assert descriptions == [
        'Updated full name from "Professor Kim" to "Kim Minsu"',
        "Added Publications (Books): Marketing 101",
    ]

    resp = client.get(f"/api/cvs/{cv_id}/changes", headers=auth_headers(client, "prof2@univ.ac.kr"))
    assert resp.status_code == 403


def test_version_number_is_unique_per_cv(client, seed_users, db):
    cv_id = save_cv(client, "prof@univ.ac.kr", SAMPLE_CV)["cv"]["cv_id"]
    user_id = seed_users["prof"].user_id

    db.add(CVHistory(cv_id=cv_id, user_id=user_id, version_number=1, snapshot="{}"))
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()
