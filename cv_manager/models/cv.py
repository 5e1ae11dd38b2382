"""CV 레코드의 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from cv_manager.database import Base


class CV(Base):
    __tablename__ = "cvs"

    cv_id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.user_id"), unique=True, nullable=False)
    full_name = Column(String(100))
    phone = Column(String(50))
    email = Column(String(100))
    address = Column(String(300))

    # 섹션별 항목 배열. 항목은 배열 위치(index)로만 식별된다.
    education = Column(JSON, nullable=False, default=list)
    academic_employment = Column(JSON, nullable=False, default=list)
    teaching = Column(JSON, nullable=False, default=list)
    courses = Column(JSON, nullable=False, default=list)
    publications_research = Column(JSON, nullable=False, default=list)
    publications_books = Column(JSON, nullable=False, default=list)
    conference_presentations = Column(JSON, nullable=False, default=list)
    professional_service = Column(JSON, nullable=False, default=list)
    internal_activities = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    owner = relationship("User", back_populates="cv")
    history = relationship("CVHistory", back_populates="cv", cascade="all, delete-orphan")
    archived_history = relationship("CVHistoryArchive", cascade="all, delete-orphan")
    item_points = relationship("ItemPoints", back_populates="cv", cascade="all, delete-orphan")
    item_points_history = relationship("ItemPointsHistory", cascade="all, delete-orphan")
