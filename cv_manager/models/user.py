"""User 및 관리자 지정 레코드의 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from cv_manager.database import Base


class User(Base):
    __tablename__ = "users"

    user_id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(100), unique=True, nullable=False)
    name = Column(String(50), nullable=False)
    department = Column(String(100))
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, server_default=func.now())

    cv = relationship("CV", back_populates="owner", uselist=False)
    admin_grant = relationship(
        "AdminUser",
        back_populates="user",
        uselist=False,
        foreign_keys="AdminUser.user_id",
    )


class AdminUser(Base):
    """관리자 권한 부여 기록. 관리자 목록은 이 테이블이 유일한 원본이다."""

    __tablename__ = "admin_users"

    admin_user_id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.user_id"), unique=True, nullable=False)
    granted_by = Column(Integer, ForeignKey("users.user_id"), nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    user = relationship("User", back_populates="admin_grant", foreign_keys=[user_id])
