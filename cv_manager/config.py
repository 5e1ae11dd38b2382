"""환경 변수 기반 애플리케이션 설정을 중앙에서 관리합니다."""

from pydantic_settings import BaseSettings
from typing import Dict, List
from pathlib import Path


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./cv_manager.db"
    SECRET_KEY: str = "change-me-to-a-random-secret-key"
    DEBUG: bool = True
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8000"]

    # JWT
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 480

    # 관리자 CV 목록
    CV_LIST_PAGE_SIZE: int = 20

    # CV 이력 보관 정책
    HISTORY_KEEP_RECENT_VERSIONS: int = 50
    HISTORY_ARCHIVE_AFTER_DAYS: int = 365
    HISTORY_ARCHIVE_BATCH_SIZE: int = 100

    # 논문 색인별 기본 점수 (index_points_config 행이 없을 때 사용)
    DEFAULT_INDEX_POINTS: Dict[str, int] = {"SSCI": 0, "SCOPUS": 0, "KCI": 0, "Other": 0}

    class Config:
        env_file = str(Path(__file__).resolve().parents[1] / ".env")


settings = Settings()
