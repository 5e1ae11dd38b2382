"""User Service 도메인 서비스 레이어입니다. 사용자 생성과 CV 작성 현황 조회를 담당합니다."""

from typing import Any, Dict, List

from fastapi import HTTPException
from sqlalchemy.orm import Session

from cv_manager.models.cv import CV
from cv_manager.models.user import AdminUser, User
from cv_manager.schemas.user import UserCreate


def list_users_with_cv_status(db: Session, include_inactive: bool = False) -> List[Dict[str, Any]]:
    q = db.query(User, CV).outerjoin(CV, CV.user_id == User.user_id)
    if not include_inactive:
        q = q.filter(User.is_active == True)  # noqa: E712
    admin_ids = {int(row[0]) for row in db.query(AdminUser.user_id).all()}
    result = []
    for user, cv in q.order_by(User.name).all():
        result.append({
            "user_id": user.user_id,
            "email": user.email,
            "name": user.name,
            "department": user.department,
            "is_active": bool(user.is_active),
            "created_at": user.created_at,
            "is_admin": user.user_id in admin_ids,
            "has_cv": cv is not None,
            "cv_id": cv.cv_id if cv else None,
            "cv_updated_at": cv.updated_at if cv else None,
        })
    return result


def create_user(db: Session, data: UserCreate) -> User:
    email = data.email.strip().lower()
    if not email:
        raise HTTPException(status_code=400, detail="이메일은 필수입니다.")
    if db.query(User).filter(User.email == email).first():
        raise HTTPException(status_code=409, detail="이미 등록된 이메일입니다.")
    user = User(email=email, name=data.name.strip(), department=data.department)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user
