"""CV 기능 API 라우터입니다. 본인 CV 작성/조회와 관리자용 목록·검색·내보내기·이력 조회를 제공합니다."""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session
from typing import List, Optional

from cv_manager.database import get_db
from cv_manager.middleware.auth_middleware import get_current_user, require_admin
from cv_manager.models.user import User
from cv_manager.schemas.cv import CVListOut, CVOut, CVSave, CVSaveResult, CVScoresOut
from cv_manager.schemas.history import ChangeLogEntry, CVHistoryOut
from cv_manager.services import cv_service, history_service, score_service

router = APIRouter(tags=["cvs"])


@router.get("/api/cv/me", response_model=CVOut)
def get_my_cv(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return cv_service.get_my_cv(db, current_user)


@router.put("/api/cv/me", response_model=CVSaveResult)
def save_my_cv(
    data: CVSave,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return cv_service.save_my_cv(db, data, current_user)


@router.get("/api/cv/me/scores", response_model=CVScoresOut)
def get_my_scores(
    year_from: Optional[str] = None,
    year_to: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    cv = cv_service.get_my_cv(db, current_user)
    year_filter = score_service.build_year_filter(year_from, year_to)
    return score_service.get_cv_scores(db, cv.cv_id, year_filter)


@router.get("/api/cvs", response_model=CVListOut)
def list_cvs(
    search: Optional[str] = None,
    page: int = 1,
    year_from: Optional[str] = None,
    year_to: Optional[str] = None,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_admin),
):
    year_filter = score_service.build_year_filter(year_from, year_to)
    return cv_service.list_cvs(db, search=search, page=page, year_filter=year_filter)


@router.get("/api/cvs/export.csv")
def export_cvs(
    search: Optional[str] = None,
    year_from: Optional[str] = None,
    year_to: Optional[str] = None,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_admin),
):
    year_filter = score_service.build_year_filter(year_from, year_to)
    csv_text = cv_service.export_csv(db, search=search, year_filter=year_filter)
    return Response(
        content=csv_text,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": 'attachment; filename="cv_scores.csv"'},
    )


@router.get("/api/cvs/{cv_id}", response_model=CVOut)
def get_cv(
    cv_id: int,
    year_from: Optional[str] = None,
    year_to: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    year_filter = score_service.build_year_filter(year_from, year_to)
    return cv_service.get_cv_payload(db, cv_id, current_user, year_filter)


@router.get("/api/cvs/{cv_id}/scores", response_model=CVScoresOut)
def get_cv_scores(
    cv_id: int,
    year_from: Optional[str] = None,
    year_to: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    cv_service.get_cv(db, cv_id, current_user)
    year_filter = score_service.build_year_filter(year_from, year_to)
    return score_service.get_cv_scores(db, cv_id, year_filter)


@router.get("/api/cvs/{cv_id}/history", response_model=List[CVHistoryOut])
def list_cv_history(
    cv_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return cv_service.get_history(db, cv_id, current_user)


@router.get("/api/cvs/{cv_id}/history/{version_number}", response_model=CVHistoryOut)
def get_cv_version(
    cv_id: int,
    version_number: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    cv_service.get_cv(db, cv_id, current_user)
    row = history_service.get_version(db, cv_id=cv_id, version_number=version_number)
    return history_service.to_response(row)


@router.get("/api/cvs/{cv_id}/changes", response_model=List[ChangeLogEntry])
def list_cv_changes(
    cv_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return cv_service.get_change_log(db, cv_id, current_user)
