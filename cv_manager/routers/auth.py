"""Auth 기능 API 라우터입니다. 요청을 검증하고 서비스 레이어로 비즈니스 로직을 위임합니다."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from cv_manager.database import get_db
from cv_manager.schemas.user import LoginRequest, TokenResponse, CurrentUserOut
from cv_manager.services.auth_service import create_access_token, mock_sso_login
from cv_manager.middleware.auth_middleware import get_current_user
from cv_manager.models.user import User
from cv_manager.utils.permissions import is_admin

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _current_user_out(db: Session, user: User) -> CurrentUserOut:
    return CurrentUserOut(
        user_id=user.user_id,
        email=user.email,
        name=user.name,
        department=user.department,
        is_active=bool(user.is_active),
        created_at=user.created_at,
        is_admin=is_admin(db, user),
    )


@router.post("/login", response_model=TokenResponse)
def login(request: LoginRequest, db: Session = Depends(get_db)):
    user = mock_sso_login(db, request.email)
    token = create_access_token(user.user_id)
    return TokenResponse(access_token=token, user=_current_user_out(db, user))


@router.post("/logout")
def logout(current_user: User = Depends(get_current_user)):
    return {"message": "로그아웃 되었습니다."}


@router.get("/me", response_model=CurrentUserOut)
def me(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return _current_user_out(db, current_user)
