"""Users 기능 API 라우터입니다. 요청을 검증하고 서비스 레이어로 비즈니스 로직을 위임합니다."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from cv_manager.database import get_db
from cv_manager.middleware.auth_middleware import require_admin
from cv_manager.models.user import User
from cv_manager.schemas.user import UserCreate, UserOut, UserWithCVStatus
from cv_manager.services import user_service

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("", response_model=List[UserWithCVStatus])
def list_users(
    include_inactive: bool = False,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_admin),
):
    return user_service.list_users_with_cv_status(db, include_inactive=include_inactive)


@router.post("", response_model=UserOut)
def create_user(
    data: UserCreate,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_admin),
):
    return user_service.create_user(db, data)
