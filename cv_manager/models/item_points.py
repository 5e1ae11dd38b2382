"""CV 항목별 점수(누적 합계), 점수 변경 이력, 논문 색인 점수 설정 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from cv_manager.database import Base


class ItemPoints(Base):
    __tablename__ = "item_points"

    item_points_id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    cv_id = Column(Integer, ForeignKey("cvs.cv_id"), nullable=False)
    section_name = Column(String(50), nullable=False)
    item_index = Column(Integer, nullable=False)
    item_data = Column(JSON, nullable=True)  # 점수 부여 또는 색인 지정 시점의 항목 사본
    points = Column(Integer, nullable=False, default=0)
    reason = Column(String(300))
    admin_id = Column(Integer, ForeignKey("users.user_id"), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    cv = relationship("CV", back_populates="item_points")

    __table_args__ = (
        UniqueConstraint("cv_id", "section_name", "item_index", name="uq_item_points_item"),
    )


class ItemPointsHistory(Base):
    __tablename__ = "item_points_history"

    history_id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    cv_id = Column(Integer, ForeignKey("cvs.cv_id"), nullable=False)
    section_name = Column(String(50), nullable=False)
    item_index = Column(Integer, nullable=False)
    points_change = Column(Integer, nullable=False)
    reason = Column(String(300))
    admin_id = Column(Integer, ForeignKey("users.user_id"), nullable=True)
    created_at = Column(DateTime, server_default=func.now())


class IndexPointsConfig(Base):
    __tablename__ = "index_points_config"

    index_name = Column(String(20), primary_key=True)  # SSCI/SCOPUS/KCI/Other
    points = Column(Integer, nullable=False, default=0)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
