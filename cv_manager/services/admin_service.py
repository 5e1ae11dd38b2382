"""관리자 지정 목록 관리 도메인 서비스입니다. 관리자 목록은 admin_users 테이블에만 보관합니다."""

import logging
from typing import Any, Dict, List

from fastapi import HTTPException
from sqlalchemy.orm import Session

from cv_manager.models.user import AdminUser, User

logger = logging.getLogger(__name__)


def _serialize(grant: AdminUser) -> Dict[str, Any]:
    return {
        "user_id": grant.user_id,
        "email": grant.user.email,
        "name": grant.user.name,
        "granted_by": grant.granted_by,
        "created_at": grant.created_at,
    }


def list_admins(db: Session) -> List[Dict[str, Any]]:
    grants = db.query(AdminUser).order_by(AdminUser.admin_user_id).all()
    return [_serialize(grant) for grant in grants]


def add_admin(db: Session, user_id: int, current_user: User) -> Dict[str, Any]:
    user = db.query(User).filter(User.user_id == user_id, User.is_active == True).first()  # noqa: E712
    if not user:
        raise HTTPException(status_code=404, detail="사용자를 찾을 수 없습니다.")
    if db.query(AdminUser).filter(AdminUser.user_id == user_id).first():
        raise HTTPException(status_code=409, detail="이미 관리자로 지정된 사용자입니다.")
    grant = AdminUser(user_id=user_id, granted_by=current_user.user_id)
    db.add(grant)
    db.commit()
    db.refresh(grant)
    logger.info("[admin] user_id=%s granted by %s", user_id, current_user.user_id)
    return _serialize(grant)


def remove_admin(db: Session, user_id: int, current_user: User) -> None:
    grant = db.query(AdminUser).filter(AdminUser.user_id == user_id).first()
    if not grant:
        raise HTTPException(status_code=404, detail="관리자로 지정되지 않은 사용자입니다.")
    if db.query(AdminUser).count() <= 1:
        raise HTTPException(status_code=400, detail="마지막 관리자는 삭제할 수 없습니다.")
    db.delete(grant)
    db.commit()
    logger.info("[admin] user_id=%s revoked by %s", user_id, current_user.user_id)
