"""CV 항목별 점수 조정, 점수 이력, 논문 색인 점수 설정/재계산 도메인 서비스입니다."""

import logging
from typing import Any, Dict, List, Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from cv_manager.config import settings
from cv_manager.models.cv import CV
from cv_manager.models.item_points import IndexPointsConfig, ItemPoints, ItemPointsHistory
from cv_manager.models.user import User
from cv_manager.schemas.item_points import ItemPointsAdjust
from cv_manager.services import score_service
from cv_manager.utils.cv_sections import (
    INDEX_NAMES,
    SECTION_NAMES,
    get_item_display_text,
    get_section_display_name,
)

logger = logging.getLogger(__name__)

PUBLICATION_SECTION = "publications_research"
DEFAULT_REASON = "Admin adjustment"


def _get_cv(db: Session, cv_id: int) -> CV:
    cv = db.query(CV).filter(CV.cv_id == cv_id).first()
    if not cv:
        raise HTTPException(status_code=404, detail="CV를 찾을 수 없습니다.")
    return cv


def _get_live_item(cv: CV, section_name: str, item_index: int) -> Optional[Dict[str, Any]]:
    items = getattr(cv, section_name, None) or []
    if 0 <= item_index < len(items) and isinstance(items[item_index], dict):
        return items[item_index]
    return None


def _find_row(db: Session, cv_id: int, section_name: str, item_index: int) -> Optional[ItemPoints]:
    return (
        db.query(ItemPoints)
        .filter(
            ItemPoints.cv_id == cv_id,
            ItemPoints.section_name == section_name,
            ItemPoints.item_index == item_index,
        )
        .first()
    )


def _validate_change(cv: CV, data: ItemPointsAdjust) -> None:
    if data.section_name not in SECTION_NAMES:
        raise HTTPException(status_code=400, detail=f"알 수 없는 섹션입니다: {data.section_name}")
    if data.points <= 0:
        raise HTTPException(status_code=400, detail="점수는 1 이상이어야 합니다.")
    if data.action not in ("add", "subtract"):
        raise HTTPException(status_code=400, detail="action 값은 add 또는 subtract 여야 합니다.")
    if _get_live_item(cv, data.section_name, data.item_index) is None:
        raise HTTPException(status_code=400, detail="해당 CV 항목을 찾을 수 없습니다.")


def _record_history(
    db: Session,
    *,
    cv: CV,
    section_name: str,
    item_index: int,
    points_change: int,
    reason: str,
    admin_id: Optional[int],
) -> None:
    db.add(
        ItemPointsHistory(
            user_id=cv.user_id,
            cv_id=cv.cv_id,
            section_name=section_name,
            item_index=item_index,
            points_change=points_change,
            reason=reason,
            admin_id=admin_id,
        )
    )


def _apply_change(db: Session, cv: CV, data: ItemPointsAdjust, admin: User) -> ItemPoints:
    delta = data.points if data.action == "add" else -data.points
    reason = data.reason or DEFAULT_REASON
    row = _find_row(db, cv.cv_id, data.section_name, data.item_index)
    if row:
        # 누적 합계만 갱신하고 최초 item_data 는 유지한다.
        row.points = (row.points or 0) + delta
        row.reason = reason
        row.admin_id = admin.user_id
    else:
        row = ItemPoints(
            user_id=cv.user_id,
            cv_id=cv.cv_id,
            section_name=data.section_name,
            item_index=data.item_index,
            item_data=_get_live_item(cv, data.section_name, data.item_index),
            points=delta,
            reason=reason,
            admin_id=admin.user_id,
        )
        db.add(row)
    _record_history(
        db,
        cv=cv,
        section_name=data.section_name,
        item_index=data.item_index,
        points_change=delta,
        reason=reason,
        admin_id=admin.user_id,
    )
    logger.info(
        "[points] cv_id=%s %s[%s] %+d by admin=%s",
        cv.cv_id, data.section_name, data.item_index, delta, admin.user_id,
    )
    return row


def adjust_item_points(db: Session, cv_id: int, data: ItemPointsAdjust, admin: User) -> ItemPoints:
    cv = _get_cv(db, cv_id)
    _validate_change(cv, data)
    row = _apply_change(db, cv, data, admin)
    db.commit()
    db.refresh(row)
    return row


def apply_batch(db: Session, cv_id: int, changes: List[ItemPointsAdjust], admin: User) -> int:
    if not changes:
        raise HTTPException(status_code=400, detail="적용할 변경 사항이 없습니다.")
    cv = _get_cv(db, cv_id)
    for change in changes:
        _validate_change(cv, change)
    for change in changes:
        _apply_change(db, cv, change, admin)
        db.flush()
    db.commit()
    return len(changes)


def serialize_row(row: ItemPoints) -> Dict[str, Any]:
    return {
        "item_points_id": row.item_points_id,
        "cv_id": row.cv_id,
        "section_name": row.section_name,
        "section_display_name": get_section_display_name(row.section_name),
        "item_index": row.item_index,
        "item_data": row.item_data,
        "item_display_text": get_item_display_text(row.section_name, row.item_data),
        "points": row.points,
        "reason": row.reason,
        "admin_id": row.admin_id,
        "updated_at": row.updated_at,
    }


def list_item_points(db: Session, cv_id: int) -> Dict[str, Any]:
    _get_cv(db, cv_id)
    rows = (
        db.query(ItemPoints)
        .filter(ItemPoints.cv_id == cv_id)
        .order_by(ItemPoints.section_name, ItemPoints.item_index)
        .all()
    )
    return {
        "cv_id": cv_id,
        "raw_total": score_service.raw_points_total(score_service.to_adjustment(row) for row in rows),
        "items": [serialize_row(row) for row in rows],
    }


def list_points_history(db: Session, cv_id: int) -> List[ItemPointsHistory]:
    _get_cv(db, cv_id)
    return (
        db.query(ItemPointsHistory)
        .filter(ItemPointsHistory.cv_id == cv_id)
        .order_by(ItemPointsHistory.created_at.desc(), ItemPointsHistory.history_id.desc())
        .all()
    )


# ---------------------------------------------------------------------------
# 논문 색인 점수
# ---------------------------------------------------------------------------

def get_index_points_config(db: Session) -> Dict[str, int]:
    config = dict(settings.DEFAULT_INDEX_POINTS)
    for row in db.query(IndexPointsConfig).all():
        config[row.index_name] = row.points
    return config


def set_index_points_config(db: Session, index_name: str, points: int) -> Dict[str, int]:
    if index_name not in INDEX_NAMES:
        raise HTTPException(status_code=400, detail=f"알 수 없는 색인입니다: {index_name}")
    row = db.query(IndexPointsConfig).filter(IndexPointsConfig.index_name == index_name).first()
    if row:
        row.points = points
    else:
        db.add(IndexPointsConfig(index_name=index_name, points=points))
    db.commit()
    logger.info("[points] index config %s=%s", index_name, points)
    return get_index_points_config(db)


def _target_points(config: Dict[str, int], index_name: Optional[str]) -> int:
    if index_name in config:
        return config[index_name]
    return config.get("Other", 0)


def set_publication_index_points(
    db: Session,
    *,
    cv: CV,
    item_index: int,
    index_name: str,
    admin_id: Optional[int] = None,
    commit: bool = True,
) -> ItemPoints:
    """색인 선택에 따라 논문 항목 점수를 설정 값으로 덮어쓴다(누적이 아닌 대체).

    선택한 색인은 item_data 에 함께 저장되어 이후 재계산의 기준이 된다.
    """
    if index_name not in INDEX_NAMES:
        raise HTTPException(status_code=400, detail=f"알 수 없는 색인입니다: {index_name}")
    config = get_index_points_config(db)
    target = _target_points(config, index_name)
    item_data = {**(_get_live_item(cv, PUBLICATION_SECTION, item_index) or {}), "index": index_name}

    row = _find_row(db, cv.cv_id, PUBLICATION_SECTION, item_index)
    previous = row.points if row else 0
    if row:
        row.points = target
        row.reason = f"Index: {index_name}"
        row.item_data = item_data
    else:
        row = ItemPoints(
            user_id=cv.user_id,
            cv_id=cv.cv_id,
            section_name=PUBLICATION_SECTION,
            item_index=item_index,
            item_data=item_data,
            points=target,
            reason=f"Index: {index_name}",
            admin_id=admin_id,
        )
        db.add(row)

    delta = target - (previous or 0)
    if delta != 0:
        _record_history(
            db,
            cv=cv,
            section_name=PUBLICATION_SECTION,
            item_index=item_index,
            points_change=delta,
            reason=f"Index set to {index_name}",
            admin_id=admin_id,
        )
    if commit:
        db.commit()
        db.refresh(row)
    return row


def sync_publication_index_points(db: Session, cv: CV, previous_items: List[Dict[str, Any]]) -> int:
    """저장 전후로 색인이 바뀐 논문 항목의 점수를 새 색인 기준으로 맞춘다."""
    synced = 0
    for index, item in enumerate(cv.publications_research or []):
        if not isinstance(item, dict):
            continue
        new_index = item.get("index") or ""
        old_item = previous_items[index] if index < len(previous_items) else None
        old_index = (old_item.get("index") or "") if isinstance(old_item, dict) else ""
        if new_index == old_index:
            continue
        set_publication_index_points(
            db,
            cv=cv,
            item_index=index,
            index_name=new_index if new_index in INDEX_NAMES else "Other",
            commit=False,
        )
        synced += 1
    if synced:
        db.commit()
    return synced


def recalc_all_publication_index_points(db: Session) -> int:
    """현재 색인 점수 설정으로 모든 CV의 논문 항목 점수를 다시 맞춘다. 갱신된 항목 수를 반환."""
    config = get_index_points_config(db)
    updated = 0

    for cv in db.query(CV).all():
        rows = {
            row.item_index: row
            for row in db.query(ItemPoints).filter(
                ItemPoints.cv_id == cv.cv_id,
                ItemPoints.section_name == PUBLICATION_SECTION,
            )
        }
        live_items = cv.publications_research or []
        candidates = set(rows)
        candidates.update(
            index
            for index, item in enumerate(live_items)
            if isinstance(item, dict) and item.get("index")
        )

        for item_index in sorted(candidates):
            row = rows.get(item_index)
            live_item = _get_live_item(cv, PUBLICATION_SECTION, item_index)
            stored_index = (row.item_data or {}).get("index") if row else None
            index_name = stored_index or (live_item or {}).get("index")
            target = _target_points(config, index_name)
            current = (row.points or 0) if row else 0
            if current == target:
                continue
            if row:
                row.points = target
                row.reason = f"Index recalculation ({index_name or 'Other'})"
            else:
                db.add(
                    ItemPoints(
                        user_id=cv.user_id,
                        cv_id=cv.cv_id,
                        section_name=PUBLICATION_SECTION,
                        item_index=item_index,
                        item_data=live_item,
                        points=target,
                        reason=f"Index recalculation ({index_name or 'Other'})",
                    )
                )
            _record_history(
                db,
                cv=cv,
                section_name=PUBLICATION_SECTION,
                item_index=item_index,
                points_change=target - current,
                reason="Index config recalculation",
                admin_id=None,
            )
            updated += 1

    db.commit()
    logger.info("[points] index recalculation updated %s item(s)", updated)
    return updated
