"""서비스 레이어 패키지 초기화 모듈입니다."""

from cv_manager.services import (
    score_service,
    history_service,
    item_points_service,
    auth_service,
    admin_service,
    user_service,
    cv_service,
    archive_service,
)
