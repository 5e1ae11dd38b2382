"""CV 저장 시점 스냅샷(버전 이력)과 보관(archive) 테이블 모델 정의입니다."""

from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from cv_manager.database import Base


class CVHistory(Base):
    __tablename__ = "cv_history"

    history_id = Column(Integer, primary_key=True, autoincrement=True)
    cv_id = Column(Integer, ForeignKey("cvs.cv_id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    version_number = Column(Integer, nullable=False)
    snapshot = Column(Text, nullable=False)  # JSON string
    created_at = Column(DateTime, server_default=func.now())

    cv = relationship("CV", back_populates="history")

    __table_args__ = (
        # 동시 저장으로 같은 버전 번호가 나오면 나중 커밋이 실패한다.
        UniqueConstraint("cv_id", "version_number", name="uq_cv_history_cv_version"),
    )


class CVHistoryArchive(Base):
    __tablename__ = "cv_history_archive"

    archive_id = Column(Integer, primary_key=True, autoincrement=True)
    cv_id = Column(Integer, ForeignKey("cvs.cv_id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    version_number = Column(Integer, nullable=False)
    snapshot = Column(Text, nullable=False)
    created_at = Column(DateTime)
    archived_at = Column(DateTime, server_default=func.now())

    __table_args__ = (
        Index("idx_cv_history_archive_cv_version", "cv_id", "version_number"),
    )
