"""항목 점수 집계(지적/전문/학점 점수)와 연도 필터 적용 집계를 검증하는 테스트입니다."""

import pytest

from cv_manager.services.score_service import (
    InvalidInputError,
    aggregate_scores,
    calculate_course_score,
    calculate_filtered_points,
    raw_points_total,
)

CV = {
    "education": [{"degree": "PhD", "year": "2005"}],
    "academic_employment": [{"position": "Professor", "start_date": "2019", "end_date": "Present"}],
    "teaching": [{"course": "Marketing", "year": "2022"}],
    "courses": [
        {"course": "Strategy", "year": "2021", "credit_hours": "3"},
        {"course": "Finance", "year": "2016", "credit_hours": "1.5"},
        {"course": "Seminar", "year": "2021", "credit_hours": "TBD"},
    ],
    "publications_research": [{"title": "P1", "year": "2021", "index": "SSCI"}],
    "publications_books": [{"title": "B1", "year": "2015"}],
    "conference_presentations": [],
    "professional_service": [{"role": "Reviewer", "year": "2018"}],
    "internal_activities": [],
}

ADJUSTMENTS = [
    {"section_name": "publications_research", "item_index": 0, "points": 5},
    {"section_name": "publications_books", "item_index": 0, "points": 3},
    {"section_name": "education", "item_index": 0, "points": 2},
    {"section_name": "teaching", "item_index": 0, "points": 4},
    {"section_name": "professional_service", "item_index": 0, "points": 1},
    {"section_name": "academic_employment", "item_index": 0, "points": 6},
    {"section_name": "courses", "item_index": 0, "points": 2},
]


def _assert_additive(scores):
    assert scores["total_points"] == (
        scores["intellectual_score"] + scores["professional_score"] + scores["course_score"]
    )


def test_category_scores_unfiltered():
    scores = aggregate_scores(CV, ADJUSTMENTS)
    assert scores["intellectual_score"] == 10
    assert scores["professional_score"] == 5
    assert scores["course_score"] == 3 + 1.5 + 2
    _assert_additive(scores)


def test_course_adjustment_is_not_double_counted():
    cv = {"courses": [{"course": "Strategy", "credit_hours": 3}]}
    adjustments = [{"section_name": "courses", "item_index": 0, "points": 2}]
    scores = aggregate_scores(cv, adjustments)
    assert scores["course_score"] == 5
    assert scores["intellectual_score"] == 0
    assert scores["professional_score"] == 0
    assert scores["total_points"] == 5


def test_course_score_without_cv_counts_only_adjustments():
    assert calculate_course_score(None, [{"section_name": "courses", "points": 4}]) == 4


def test_unknown_sections_only_count_in_raw_total():
    adjustments = [
        {"section_name": "mystery", "item_index": 0, "points": 7},
        {"section_name": "teaching", "item_index": 0, "points": 1},
        {"section_name": "courses", "item_index": 0, "points": 9},
    ]
    scores = aggregate_scores({}, adjustments)
    assert scores["professional_score"] == 1
    assert scores["intellectual_score"] == 0
    assert scores["total_points"] == 10
    assert raw_points_total(adjustments) == 8


def test_unbounded_filter_matches_plain_aggregation():
    assert calculate_filtered_points(CV, ADJUSTMENTS, {"from": "", "to": ""}) == aggregate_scores(CV, ADJUSTMENTS)


def test_filtered_points_follow_item_dates():
    scores = calculate_filtered_points(CV, ADJUSTMENTS, {"from": "2020", "to": "2021"})
    # education(2) + publication 2021(5); book 2015 dropped
    assert scores["intellectual_score"] == 7
    # teaching 2022 and service 2018 dropped
    assert scores["professional_score"] == 0
    # Strategy 2021 (3 credits + 2 bonus); Finance 2016 dropped; Seminar has no numeric credits
    assert scores["course_score"] == 5
    _assert_additive(scores)


def test_adjustment_for_deleted_item_is_excluded_when_filtering():
    adjustments = [
        {"section_name": "publications_research", "item_index": 3, "points": 10},
        {"section_name": "education", "item_index": 5, "points": 10},
    ]
    scores = calculate_filtered_points(CV, adjustments, {"from": "2000", "to": "2030"})
    assert scores["intellectual_score"] == 0


def test_missing_cv_is_invalid_input():
    with pytest.raises(InvalidInputError):
        calculate_filtered_points(None, ADJUSTMENTS, {"from": "2020", "to": "2021"})


def test_publication_scenario_by_year_range():
    cv = {"publications_research": [{"title": "P1", "year": "2021", "index": "SSCI"}]}
    adjustments = [{"section_name": "publications_research", "item_index": 0, "points": 5}]

    kept = calculate_filtered_points(cv, adjustments, {"from": "2020", "to": "2021"})
    dropped = calculate_filtered_points(cv, adjustments, {"from": "2022", "to": "2023"})

    assert kept["intellectual_score"] == 5
    assert dropped["intellectual_score"] == 0
    assert dropped["total_points"] == 0
