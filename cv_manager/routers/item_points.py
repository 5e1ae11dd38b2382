"""항목 점수 API 라우터입니다. 관리자의 점수 조정, 점수 이력, 논문 색인 점수 설정을 제공합니다."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import Dict, List

from cv_manager.database import get_db
from cv_manager.middleware.auth_middleware import require_admin
from cv_manager.models.cv import CV
from cv_manager.models.user import User
from cv_manager.schemas.item_points import (
    IndexPointsUpdate,
    IndexPointsUpdateResult,
    ItemPointsAdjust,
    ItemPointsBatchRequest,
    ItemPointsBatchResult,
    ItemPointsHistoryOut,
    ItemPointsListOut,
    ItemPointsOut,
    PublicationIndexRequest,
    RecalculateResult,
)
from cv_manager.services import item_points_service

router = APIRouter(tags=["item-points"])


@router.get("/api/cvs/{cv_id}/item-points", response_model=ItemPointsListOut)
def list_item_points(
    cv_id: int,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_admin),
):
    return item_points_service.list_item_points(db, cv_id)


@router.post("/api/cvs/{cv_id}/item-points", response_model=ItemPointsOut)
def adjust_item_points(
    cv_id: int,
    data: ItemPointsAdjust,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    row = item_points_service.adjust_item_points(db, cv_id, data, current_user)
    return item_points_service.serialize_row(row)


@router.post("/api/cvs/{cv_id}/item-points/batch", response_model=ItemPointsBatchResult)
def apply_item_points_batch(
    cv_id: int,
    data: ItemPointsBatchRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    applied = item_points_service.apply_batch(db, cv_id, data.changes, current_user)
    return {"applied": applied}


@router.get("/api/cvs/{cv_id}/item-points/history", response_model=List[ItemPointsHistoryOut])
def list_item_points_history(
    cv_id: int,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_admin),
):
    return item_points_service.list_points_history(db, cv_id)


@router.post("/api/cvs/{cv_id}/item-points/publication-index", response_model=ItemPointsOut)
def set_publication_index(
    cv_id: int,
    data: PublicationIndexRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    cv = db.query(CV).filter(CV.cv_id == cv_id).first()
    if not cv:
        raise HTTPException(status_code=404, detail="CV를 찾을 수 없습니다.")
    if not 0 <= data.item_index < len(cv.publications_research or []):
        raise HTTPException(status_code=400, detail="해당 논문 항목을 찾을 수 없습니다.")
    row = item_points_service.set_publication_index_points(
        db,
        cv=cv,
        item_index=data.item_index,
        index_name=data.index_name,
        admin_id=current_user.user_id,
    )
    return item_points_service.serialize_row(row)


@router.get("/api/index-points", response_model=Dict[str, int])
def get_index_points(
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_admin),
):
    return item_points_service.get_index_points_config(db)


@router.put("/api/index-points/{index_name}", response_model=IndexPointsUpdateResult)
def update_index_points(
    index_name: str,
    data: IndexPointsUpdate,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_admin),
):
    config = item_points_service.set_index_points_config(db, index_name, data.points)
    recalculated = item_points_service.recalc_all_publication_index_points(db)
    return {"config": config, "recalculated": recalculated}


@router.post("/api/index-points/recalculate", response_model=RecalculateResult)
def recalculate_index_points(
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_admin),
):
    return {"updated": item_points_service.recalc_all_publication_index_points(db)}
