"""CV 스냅샷(버전 이력) 저장/조회와 스냅샷 간 변경 내역 생성을 담당하는 도메인 서비스입니다."""

import json
import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping

from fastapi import HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session

from cv_manager.models.cv import CV
from cv_manager.models.cv_history import CVHistory, CVHistoryArchive
from cv_manager.utils.cv_sections import (
    SCALAR_FIELDS,
    SECTION_NAMES,
    canonical_json,
    cv_to_dict,
    get_item_display_text,
    get_section_display_name,
)

logger = logging.getLogger(__name__)


def build_snapshot(cv: CV) -> Dict[str, Any]:
    payload = cv_to_dict(cv)
    payload.pop("cv_id", None)
    payload.pop("user_id", None)
    return payload


def create_snapshot(db: Session, *, cv: CV, user_id: int) -> CVHistory:
    current_max = (
        db.query(func.max(CVHistory.version_number))
        .filter(CVHistory.cv_id == cv.cv_id)
        .scalar()
    )
    # 보관된 버전과 번호가 겹치지 않도록 archive 테이블의 최대값도 함께 본다.
    archived_max = (
        db.query(func.max(CVHistoryArchive.version_number))
        .filter(CVHistoryArchive.cv_id == cv.cv_id)
        .scalar()
    )
    version_number = max(current_max or 0, archived_max or 0) + 1

    row = CVHistory(
        cv_id=cv.cv_id,
        user_id=user_id,
        version_number=version_number,
        snapshot=json.dumps(build_snapshot(cv), ensure_ascii=False),
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info("[history] cv_id=%s saved as version %s", cv.cv_id, version_number)
    return row


def list_history(db: Session, *, cv_id: int) -> List[CVHistory]:
    return (
        db.query(CVHistory)
        .filter(CVHistory.cv_id == cv_id)
        .order_by(CVHistory.version_number.desc())
        .all()
    )


def get_version(db: Session, *, cv_id: int, version_number: int) -> CVHistory:
    row = (
        db.query(CVHistory)
        .filter(
            CVHistory.cv_id == cv_id,
            CVHistory.version_number == version_number,
        )
        .first()
    )
    if not row:
        raise HTTPException(status_code=404, detail="버전 이력을 찾을 수 없습니다.")
    return row


def parse_snapshot(row) -> Dict[str, Any]:
    try:
        return json.loads(row.snapshot or "{}")
    except json.JSONDecodeError:
        logger.warning("[history] unreadable snapshot history_id=%s", row.history_id)
        return {}


def to_response(row) -> Dict[str, Any]:
    return {
        "history_id": row.history_id,
        "cv_id": row.cv_id,
        "user_id": row.user_id,
        "version_number": row.version_number,
        "created_at": row.created_at,
        "snapshot": parse_snapshot(row),
    }


def to_diff_input(row) -> Dict[str, Any]:
    """스냅샷 행을 비교기 입력 형태(평탄화된 CV + 버전/시각)로 변환한다."""
    return {
        **parse_snapshot(row),
        "version_number": row.version_number,
        "created_at": row.created_at,
    }


# ---------------------------------------------------------------------------
# 스냅샷 비교
# ---------------------------------------------------------------------------

def _field_label(field: str) -> str:
    return field.replace("_", " ")


def _format_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, (dict, list)):
        return canonical_json(value)
    return str(value)


def _snapshot_order_key(snapshot: Mapping[str, Any]):
    version = snapshot.get("version_number")
    created_at = snapshot.get("created_at") or datetime.min
    return (version is None, version if version is not None else 0, created_at)


def _diff_item_fields(previous: Mapping[str, Any], current: Mapping[str, Any]) -> List[str]:
    changes = []
    for field in sorted(set(previous) | set(current)):
        old = previous.get(field)
        new = current.get(field)
        if canonical_json(old) == canonical_json(new):
            continue
        changes.append(f'{field}: "{_format_value(old)}" → "{_format_value(new)}"')
    return changes


def _as_item(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {"value": value}


def diff_snapshots(previous: Mapping[str, Any], current: Mapping[str, Any]) -> List[str]:
    """연속된 두 스냅샷의 변경 내역 문장 목록을 생성 순서대로 반환한다.

    섹션 항목은 배열 위치로 비교하므로 목록 앞쪽에 항목을 끼워 넣으면 이후 항목이
    모두 변경된 것으로 보고된다.
    """
    descriptions: List[str] = []

    for field in SCALAR_FIELDS:
        old = previous.get(field) or ""
        new = current.get(field) or ""
        if old != new:
            descriptions.append(f'Updated {_field_label(field)} from "{old}" to "{new}"')

    for section in SECTION_NAMES:
        label = get_section_display_name(section)
        old_items = previous.get(section) or []
        new_items = current.get(section) or []
        for index in range(max(len(old_items), len(new_items))):
            has_old = index < len(old_items)
            has_new = index < len(new_items)
            if has_old and not has_new:
                summary = get_item_display_text(section, _as_item(old_items[index]))
                descriptions.append(f"Removed {label}: {summary}")
            elif has_new and not has_old:
                summary = get_item_display_text(section, _as_item(new_items[index]))
                descriptions.append(f"Added {label}: {summary}")
            elif canonical_json(old_items[index]) != canonical_json(new_items[index]):
                old_item = _as_item(old_items[index])
                new_item = _as_item(new_items[index])
                summary = get_item_display_text(section, new_item)
                fields = "; ".join(_diff_item_fields(old_item, new_item))
                descriptions.append(f"Updated {label} ({summary}) — {fields}")

    return descriptions


def build_change_log(snapshots: Iterable[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    ordered = sorted(snapshots, key=_snapshot_order_key)
    pairs = list(zip(ordered, ordered[1:]))
    entries: List[Dict[str, Any]] = []
    # 최신 버전 쌍부터 만들어 같은 시각의 저장도 최신 순서가 되도록 한다.
    for previous, current in reversed(pairs):
        for description in diff_snapshots(previous, current):
            entries.append({"created_at": current.get("created_at"), "description": description})
    # 정렬은 안정적이므로 같은 시각의 항목은 생성 순서를 유지한다.
    return sorted(entries, key=lambda entry: entry["created_at"] or datetime.min, reverse=True)


def get_change_log(db: Session, *, cv_id: int) -> List[Dict[str, Any]]:
    rows = list_history(db, cv_id=cv_id)
    return build_change_log(to_diff_input(row) for row in rows)
