"""관리자 지정 API 라우터입니다."""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from typing import List

from cv_manager.database import get_db
from cv_manager.middleware.auth_middleware import require_admin
from cv_manager.models.user import User
from cv_manager.schemas.user import AdminCreate, AdminOut
from cv_manager.services import admin_service

router = APIRouter(prefix="/api/admins", tags=["admins"])


@router.get("", response_model=List[AdminOut])
def list_admins(
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_admin),
):
    return admin_service.list_admins(db)


@router.post("", response_model=AdminOut)
def add_admin(
    data: AdminCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    return admin_service.add_admin(db, data.user_id, current_user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_admin(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    admin_service.remove_admin(db, user_id, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
