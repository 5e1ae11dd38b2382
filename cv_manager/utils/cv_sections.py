"""CV 섹션 상수, 표시 이름, 연도 파싱 등 CV 항목 공용 헬퍼입니다."""

import json
import re
from typing import Any, Dict, Mapping, Optional

SCALAR_FIELDS = ("full_name", "phone", "email", "address")

SECTION_NAMES = (
    "education",
    "academic_employment",
    "teaching",
    "courses",
    "publications_research",
    "publications_books",
    "conference_presentations",
    "professional_service",
    "internal_activities",
)

SECTION_DISPLAY_NAMES = {
    "education": "Education",
    "academic_employment": "Employment History",
    "teaching": "Teaching",
    "courses": "Courses (Credit Hours)",
    "publications_research": "Publications (Research)",
    "publications_books": "Publications (Books)",
    "conference_presentations": "Conference Presentations",
    "professional_service": "Professional Service",
    "internal_activities": "Internal Activities",
}

# 기간(start/end)으로 날짜를 판단하는 섹션. 나머지는 year 필드 하나로 판단한다.
DATE_RANGE_SECTIONS = ("academic_employment",)
ALWAYS_INCLUDED_SECTIONS = ("education",)

OPEN_ENDED_SENTINEL = "Present"

INDEX_NAMES = ("SSCI", "SCOPUS", "KCI", "Other")

_YEAR_PATTERN = re.compile(r"\d{4}")


def extract_year(value: Any) -> Optional[int]:
    """문자열에서 처음 나오는 4자리 숫자를 연도로 해석한다. 없으면 None."""
    if value is None or isinstance(value, bool):
        return None
    match = _YEAR_PATTERN.search(str(value))
    if not match:
        return None
    return int(match.group(0))


def parse_year_bound(value: Any) -> Optional[int]:
    """연도 필터 경계값을 정수로 변환한다. 비었거나 숫자가 아니면 경계 없음(None)."""
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        return None


def parse_credit_hours(value: Any) -> float:
    if value is None or isinstance(value, bool):
        return 0.0
    match = re.match(r"\s*[-+]?(\d+(\.\d*)?|\.\d+)", str(value))
    if not match:
        return 0.0
    return float(match.group(0))


def get_section_display_name(section_name: str) -> str:
    return SECTION_DISPLAY_NAMES.get(section_name, section_name)


def get_item_display_text(section_name: str, item: Optional[Mapping[str, Any]]) -> str:
    if not item:
        return "Unknown item"

    if section_name == "education":
        return f"{item.get('degree') or 'Degree'} - {item.get('institution') or 'Institution'}"
    if section_name == "academic_employment":
        return f"{item.get('position') or 'Position'} at {item.get('institution') or 'Institution'}"
    if section_name == "teaching":
        return f"{item.get('course') or 'Course'} - {item.get('institution') or 'Institution'}"
    if section_name == "courses":
        credit = f" ({item['credit_hours']} credits)" if item.get("credit_hours") else ""
        return f"{item.get('course') or 'Course'} - {item.get('institution') or 'Institution'}{credit}"
    if section_name == "publications_research":
        index_text = f" ({item['index']})" if item.get("index") else ""
        return f"{item.get('title') or 'Research Publication'}{index_text}"
    if section_name == "publications_books":
        return item.get("title") or "Book Publication"
    if section_name == "conference_presentations":
        return item.get("title") or "Conference Presentation"
    if section_name == "professional_service":
        return item.get("role") or "Professional Service"
    if section_name == "internal_activities":
        return f"{item.get('position_type') or 'Service Type'} - {item.get('details') or 'Details'}"
    return canonical_json(item)[:50] + "..."


def canonical_json(value: Any) -> str:
    return json.dumps(value, sort_keys=True, ensure_ascii=False, default=str)


def cv_to_dict(cv) -> Dict[str, Any]:
    """CV ORM 객체를 코어 계산 함수가 받는 dict 형태로 변환한다."""
    payload: Dict[str, Any] = {
        "cv_id": cv.cv_id,
        "user_id": cv.user_id,
    }
    for field in SCALAR_FIELDS:
        payload[field] = getattr(cv, field)
    for section in SECTION_NAMES:
        payload[section] = list(getattr(cv, section) or [])
    return payload
