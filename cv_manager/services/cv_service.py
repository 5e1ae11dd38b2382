"""CV Service 도메인 서비스 레이어입니다. CV 저장(스냅샷 포함), 관리자 목록/검색/내보내기를 담당합니다."""

import csv
import io
import math
from typing import Any, Dict, List, Mapping, Optional

from fastapi import HTTPException
from sqlalchemy import or_
from sqlalchemy.orm import Session

from cv_manager.config import settings
from cv_manager.models.cv import CV
from cv_manager.models.user import User
from cv_manager.schemas.cv import CVOut, CVSave
from cv_manager.services import history_service, item_points_service, score_service
from cv_manager.utils.cv_sections import SCALAR_FIELDS, SECTION_NAMES, cv_to_dict
from cv_manager.utils.permissions import can_view_cv


def get_my_cv(db: Session, current_user: User) -> CV:
    cv = db.query(CV).filter(CV.user_id == current_user.user_id).first()
    if not cv:
        raise HTTPException(status_code=404, detail="작성된 CV가 없습니다.")
    return cv


def get_cv(db: Session, cv_id: int, current_user: User) -> CV:
    cv = db.query(CV).filter(CV.cv_id == cv_id).first()
    if not cv:
        raise HTTPException(status_code=404, detail="CV를 찾을 수 없습니다.")
    if not can_view_cv(db, cv, current_user):
        raise HTTPException(status_code=403, detail="이 CV에 접근할 권한이 없습니다.")
    return cv


def get_cv_payload(db: Session, cv_id: int, current_user: User, year_filter: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    cv = get_cv(db, cv_id, current_user)
    payload = {
        **cv_to_dict(cv),
        "created_at": cv.created_at,
        "updated_at": cv.updated_at,
    }
    return score_service.filter_cv_by_year(payload, year_filter)


def save_my_cv(db: Session, data: CVSave, current_user: User) -> Dict[str, Any]:
    payload = data.model_dump()
    if not payload.get("email"):
        payload["email"] = current_user.email

    cv = db.query(CV).filter(CV.user_id == current_user.user_id).first()
    previous_publications = list(cv.publications_research or []) if cv else []
    if cv is None:
        cv = CV(user_id=current_user.user_id)
        db.add(cv)
    for field in SCALAR_FIELDS:
        setattr(cv, field, payload.get(field))
    for section in SECTION_NAMES:
        setattr(cv, section, list(payload.get(section) or []))
    db.commit()
    db.refresh(cv)

    item_points_service.sync_publication_index_points(db, cv, previous_publications)
    row = history_service.create_snapshot(db, cv=cv, user_id=current_user.user_id)
    return {"cv": CVOut.model_validate(cv), "version_number": row.version_number}


def _search_query(db: Session, search: Optional[str]):
    q = db.query(CV)
    if search and search.strip():
        keyword = f"%{search.strip()}%"
        q = q.filter(or_(CV.full_name.ilike(keyword), CV.email.ilike(keyword)))
    return q


def _summary(cv: CV, scores: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "cv_id": cv.cv_id,
        "user_id": cv.user_id,
        "full_name": cv.full_name,
        "email": cv.email,
        "updated_at": cv.updated_at,
        "section_counts": {section: len(getattr(cv, section) or []) for section in SECTION_NAMES},
        **scores,
    }


def list_cvs(
    db: Session,
    *,
    search: Optional[str] = None,
    page: int = 1,
    year_filter: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    if page < 1:
        raise HTTPException(status_code=400, detail="page 는 1 이상이어야 합니다.")
    page_size = settings.CV_LIST_PAGE_SIZE
    q = _search_query(db, search)
    total_count = q.count()
    cvs = (
        q.order_by(CV.updated_at.desc(), CV.cv_id.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )
    scores = score_service.get_scores_by_cv(db, cvs, year_filter)
    return {
        "items": [_summary(cv, scores[cv.cv_id]) for cv in cvs],
        "total_count": total_count,
        "page": page,
        "page_size": page_size,
        "total_pages": math.ceil(total_count / page_size) if total_count else 0,
    }


def export_csv(db: Session, *, search: Optional[str] = None, year_filter: Optional[Mapping[str, Any]] = None) -> str:
    cvs = _search_query(db, search).order_by(CV.updated_at.desc(), CV.cv_id.desc()).all()
    scores = score_service.get_scores_by_cv(db, cvs, year_filter)
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow([
        "cv_id", "full_name", "email", "phone",
        "intellectual_score", "professional_score", "course_score", "total_points", "updated_at",
    ])
    for cv in cvs:
        row = scores[cv.cv_id]
        writer.writerow([
            cv.cv_id,
            cv.full_name or "",
            cv.email or "",
            cv.phone or "",
            row["intellectual_score"],
            row["professional_score"],
            row["course_score"],
            row["total_points"],
            cv.updated_at.isoformat() if cv.updated_at else "",
        ])
    return output.getvalue()


def get_history(db: Session, cv_id: int, current_user: User) -> List[Dict[str, Any]]:
    get_cv(db, cv_id, current_user)
    return [history_service.to_response(row) for row in history_service.list_history(db, cv_id=cv_id)]


def get_change_log(db: Session, cv_id: int, current_user: User) -> List[Dict[str, Any]]:
    get_cv(db, cv_id, current_user)
    return history_service.get_change_log(db, cv_id=cv_id)
