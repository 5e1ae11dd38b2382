"""SQLAlchemy 모델 패키지 초기화 모듈입니다."""

from cv_manager.models.user import User, AdminUser
from cv_manager.models.cv import CV
from cv_manager.models.cv_history import CVHistory, CVHistoryArchive
from cv_manager.models.item_points import ItemPoints, ItemPointsHistory, IndexPointsConfig

__all__ = [
    "User", "AdminUser",
    "CV",
    "CVHistory", "CVHistoryArchive",
    "ItemPoints", "ItemPointsHistory", "IndexPointsConfig",
]
