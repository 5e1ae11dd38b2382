"""CV 이력 보관(archive) 관리 API 라우터입니다."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from cv_manager.database import get_db
from cv_manager.middleware.auth_middleware import require_admin
from cv_manager.models.user import User
from cv_manager.schemas.history import ArchiveRestoreRequest, ArchiveRestoreResult, ArchiveRunResult, ArchiveStats
from cv_manager.services import archive_service

router = APIRouter(prefix="/api/archive", tags=["archive"])


@router.post("/run", response_model=ArchiveRunResult)
def run_archive(
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_admin),
):
    return archive_service.run_archive_process(db)


@router.get("/stats", response_model=ArchiveStats)
def archive_stats(
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_admin),
):
    return archive_service.get_archive_stats(db)


@router.post("/cvs/{cv_id}/restore", response_model=ArchiveRestoreResult)
def restore_archived(
    cv_id: int,
    data: ArchiveRestoreRequest,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_admin),
):
    restored = archive_service.restore_archived_versions(db, cv_id, data.version_numbers)
    return {"restored": restored}
