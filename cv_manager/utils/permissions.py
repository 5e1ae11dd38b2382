"""Permissions 관련 공용 유틸리티 헬퍼입니다."""

from sqlalchemy.orm import Session

from cv_manager.models.cv import CV
from cv_manager.models.user import AdminUser, User


def is_admin(db: Session, user: User) -> bool:
    cached = getattr(user, "_is_admin_cache", None)
    if cached is not None:
        return cached
    granted = db.query(AdminUser).filter(AdminUser.user_id == user.user_id).first() is not None
    setattr(user, "_is_admin_cache", granted)
    return granted


def can_view_cv(db: Session, cv: CV, user: User) -> bool:
    return cv.user_id == user.user_id or is_admin(db, user)
