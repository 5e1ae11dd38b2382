"""CV 항목 점수 집계와 연도 범위 필터를 담당하는 도메인 서비스입니다.

앞부분의 계산 함수들은 DB에 접근하지 않는 순수 함수이며, CV는 ``cv_to_dict`` 형태의
dict, 점수 조정은 ``{section_name, item_index, points, item_data}`` dict 목록으로 받는다.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from fastapi import HTTPException
from sqlalchemy.orm import Session

from cv_manager.models.cv import CV
from cv_manager.models.item_points import ItemPoints
from cv_manager.utils.cv_sections import (
    ALWAYS_INCLUDED_SECTIONS,
    DATE_RANGE_SECTIONS,
    OPEN_ENDED_SENTINEL,
    SECTION_NAMES,
    cv_to_dict,
    extract_year,
    parse_credit_hours,
    parse_year_bound,
)

INTELLECTUAL_SECTIONS = (
    "publications_research",
    "publications_books",
    "education",
    "conference_presentations",
)
PROFESSIONAL_SECTIONS = ("teaching", "professional_service", "internal_activities")
COURSE_SECTION = "courses"

MIN_YEAR = 0
MAX_YEAR = 9999


class InvalidInputError(ValueError):
    pass


def _normalize_number(value):
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _sum_points(adjustments: Iterable[Mapping[str, Any]], sections: Tuple[str, ...]):
    return sum(
        adj.get("points") or 0
        for adj in adjustments
        if adj.get("section_name") in sections
    )


def calculate_intellectual_score(adjustments: Iterable[Mapping[str, Any]]):
    return _sum_points(adjustments or [], INTELLECTUAL_SECTIONS)


def calculate_professional_score(adjustments: Iterable[Mapping[str, Any]]):
    return _sum_points(adjustments or [], PROFESSIONAL_SECTIONS)


def calculate_course_score(cv: Optional[Mapping[str, Any]], adjustments: Iterable[Mapping[str, Any]] = ()):
    """수강 과목 학점 합계(1학점 = 1점)에 courses 섹션 가산점을 더한다."""
    score = 0
    if cv and isinstance(cv.get(COURSE_SECTION), list):
        score += sum(
            parse_credit_hours(course.get("credit_hours"))
            for course in cv[COURSE_SECTION]
            if isinstance(course, Mapping)
        )
    score += _sum_points(adjustments or [], (COURSE_SECTION,))
    return _normalize_number(score)


def raw_points_total(adjustments: Iterable[Mapping[str, Any]]):
    """courses 를 제외한 모든 조정 점수의 단순 합계. 알 수 없는 섹션도 포함된다."""
    return sum(
        adj.get("points") or 0
        for adj in adjustments or []
        if adj.get("section_name") != COURSE_SECTION
    )


def aggregate_scores(cv: Optional[Mapping[str, Any]], adjustments: Iterable[Mapping[str, Any]]) -> Dict[str, Any]:
    adjustments = list(adjustments or [])
    intellectual = calculate_intellectual_score(adjustments)
    professional = calculate_professional_score(adjustments)
    course = calculate_course_score(cv, adjustments)
    return {
        "total_points": _normalize_number(intellectual + professional + course),
        "intellectual_score": _normalize_number(intellectual),
        "professional_score": _normalize_number(professional),
        "course_score": course,
    }


def resolve_year_bounds(year_filter: Optional[Mapping[str, Any]]) -> Tuple[Optional[int], Optional[int]]:
    if not year_filter:
        return None, None
    return parse_year_bound(year_filter.get("from")), parse_year_bound(year_filter.get("to"))


def is_item_in_year_range(
    section_name: str,
    item: Mapping[str, Any],
    year_from: Optional[int],
    year_to: Optional[int],
) -> bool:
    lower = MIN_YEAR if year_from is None else year_from
    upper = MAX_YEAR if year_to is None else year_to

    if section_name in DATE_RANGE_SECTIONS:
        start_year = extract_year(item.get("start_date"))
        if start_year is None:
            return False
        end_raw = item.get("end_date")
        if not end_raw or str(end_raw).strip() == OPEN_ENDED_SENTINEL:
            # 현재 진행 중인 기간은 시작 연도가 상한 이전이면 항상 겹친다.
            return start_year <= upper
        end_year = extract_year(end_raw)
        if end_year is None:
            return False
        return start_year <= upper and end_year >= lower

    year = extract_year(item.get("year"))
    if year is None:
        return False
    return lower <= year <= upper


def filter_cv_by_year(cv: Mapping[str, Any], year_filter: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    """연도 범위와 겹치는 항목만 남긴 CV 사본을 반환한다. 학력 섹션은 항상 전체 유지."""
    year_from, year_to = resolve_year_bounds(year_filter)
    if year_from is None and year_to is None:
        return cv

    filtered = dict(cv)
    for section in SECTION_NAMES:
        items = cv.get(section) or []
        if section in ALWAYS_INCLUDED_SECTIONS:
            filtered[section] = list(items)
            continue
        filtered[section] = [
            item
            for item in items
            if isinstance(item, Mapping) and is_item_in_year_range(section, item, year_from, year_to)
        ]
    return filtered


def _resolve_item(cv: Mapping[str, Any], adjustment: Mapping[str, Any]) -> Optional[Mapping[str, Any]]:
    items = cv.get(adjustment.get("section_name"))
    index = adjustment.get("item_index")
    if not isinstance(items, list) or not isinstance(index, int) or isinstance(index, bool):
        return None
    if index < 0 or index >= len(items):
        return None
    item = items[index]
    return item if isinstance(item, Mapping) else None


def _adjustment_in_range(
    cv: Mapping[str, Any],
    adjustment: Mapping[str, Any],
    year_from: Optional[int],
    year_to: Optional[int],
) -> bool:
    item = _resolve_item(cv, adjustment)
    if item is None:
        return False
    section = adjustment.get("section_name")
    if section in ALWAYS_INCLUDED_SECTIONS:
        return True
    return is_item_in_year_range(section, item, year_from, year_to)


def calculate_filtered_points(
    cv: Optional[Mapping[str, Any]],
    adjustments: Iterable[Mapping[str, Any]],
    year_filter: Optional[Mapping[str, Any]],
) -> Dict[str, Any]:
    if cv is None:
        raise InvalidInputError("point adjustments were supplied for a CV that could not be resolved")

    adjustments = list(adjustments or [])
    year_from, year_to = resolve_year_bounds(year_filter)
    if year_from is None and year_to is None:
        return aggregate_scores(cv, adjustments)

    included = [adj for adj in adjustments if _adjustment_in_range(cv, adj, year_from, year_to)]
    return aggregate_scores(filter_cv_by_year(cv, year_filter), included)


def to_adjustment(row: ItemPoints) -> Dict[str, Any]:
    return {
        "section_name": row.section_name,
        "item_index": row.item_index,
        "points": row.points or 0,
        "item_data": row.item_data,
    }


def build_year_filter(year_from: Optional[str], year_to: Optional[str]) -> Dict[str, str]:
    for label, value in (("year_from", year_from), ("year_to", year_to)):
        if value and value.strip() and parse_year_bound(value) is None:
            raise HTTPException(status_code=400, detail=f"{label} 값은 연도(숫자)여야 합니다.")
    return {"from": year_from or "", "to": year_to or ""}


def score_cv(cv: CV, rows: List[ItemPoints], year_filter: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    try:
        return calculate_filtered_points(
            cv_to_dict(cv) if cv is not None else None,
            [to_adjustment(row) for row in rows],
            year_filter,
        )
    except InvalidInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


def get_cv_scores(db: Session, cv_id: int, year_filter: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    cv = db.query(CV).filter(CV.cv_id == cv_id).first()
    if not cv:
        raise HTTPException(status_code=404, detail="CV를 찾을 수 없습니다.")
    rows = db.query(ItemPoints).filter(ItemPoints.cv_id == cv_id).all()
    return {"cv_id": cv.cv_id, **score_cv(cv, rows, year_filter)}


def get_scores_by_cv(db: Session, cvs: List[CV], year_filter: Optional[Mapping[str, Any]] = None) -> Dict[int, Dict[str, Any]]:
    """여러 CV의 점수를 한 번의 item_points 조회로 계산한다."""
    cv_ids = [cv.cv_id for cv in cvs]
    grouped: Dict[int, List[ItemPoints]] = {cv_id: [] for cv_id in cv_ids}
    if cv_ids:
        for row in db.query(ItemPoints).filter(ItemPoints.cv_id.in_(cv_ids)).all():
            grouped[row.cv_id].append(row)
    return {cv.cv_id: score_cv(cv, grouped[cv.cv_id], year_filter) for cv in cvs}
