"""CV 버전 이력 보관(archive) 도메인 서비스입니다.

CV별 최근 ``HISTORY_KEEP_RECENT_VERSIONS`` 개만 cv_history 에 남기고, 그보다 오래된 버전과
``HISTORY_ARCHIVE_AFTER_DAYS`` 일이 지난 버전은 cv_history_archive 로 옮긴다.
"""

import logging
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from fastapi import HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session

from cv_manager.config import settings
from cv_manager.models.cv import CV
from cv_manager.models.cv_history import CVHistory, CVHistoryArchive

logger = logging.getLogger(__name__)


def _move_to_archive(db: Session, rows: List[CVHistory]) -> int:
    for row in rows:
        db.add(
            CVHistoryArchive(
                cv_id=row.cv_id,
                user_id=row.user_id,
                version_number=row.version_number,
                snapshot=row.snapshot,
                created_at=row.created_at,
            )
        )
        db.delete(row)
    db.commit()
    return len(rows)


def get_cvs_for_archiving(db: Session) -> List[int]:
    rows = (
        db.query(CVHistory.cv_id)
        .group_by(CVHistory.cv_id)
        .having(func.count(CVHistory.history_id) > settings.HISTORY_KEEP_RECENT_VERSIONS)
        .all()
    )
    return [int(row[0]) for row in rows]


def archive_old_versions(db: Session, cv_id: int) -> int:
    recent = (
        db.query(CVHistory.version_number)
        .filter(CVHistory.cv_id == cv_id)
        .order_by(CVHistory.version_number.desc())
        .limit(settings.HISTORY_KEEP_RECENT_VERSIONS)
        .all()
    )
    if not recent:
        return 0
    cutoff = recent[-1][0]
    old_rows = (
        db.query(CVHistory)
        .filter(CVHistory.cv_id == cv_id, CVHistory.version_number < cutoff)
        .all()
    )
    if not old_rows:
        return 0
    archived = _move_to_archive(db, old_rows)
    logger.info("[archive] cv_id=%s archived %s version(s) below v%s", cv_id, archived, cutoff)
    return archived


def archive_by_date(db: Session, now: Optional[datetime] = None) -> int:
    cutoff = (now or datetime.utcnow()) - timedelta(days=settings.HISTORY_ARCHIVE_AFTER_DAYS)
    rows = (
        db.query(CVHistory)
        .filter(CVHistory.created_at < cutoff)
        .order_by(CVHistory.history_id)
        .limit(settings.HISTORY_ARCHIVE_BATCH_SIZE)
        .all()
    )
    if not rows:
        return 0
    return _move_to_archive(db, rows)


def run_archive_process(db: Session, now: Optional[datetime] = None) -> Dict[str, int]:
    by_count = sum(archive_old_versions(db, cv_id) for cv_id in get_cvs_for_archiving(db))

    by_date = 0
    while True:
        batch = archive_by_date(db, now=now)
        if batch == 0:
            break
        by_date += batch

    logger.info("[archive] completed: by_count=%s by_date=%s", by_count, by_date)
    return {
        "archived_by_count": by_count,
        "archived_by_date": by_date,
        "total_archived": by_count + by_date,
    }


def get_archive_stats(db: Session) -> Dict[str, int]:
    return {
        "main_count": db.query(CVHistory).count(),
        "archive_count": db.query(CVHistoryArchive).count(),
    }


def restore_archived_versions(db: Session, cv_id: int, version_numbers: List[int]) -> int:
    if not db.query(CV).filter(CV.cv_id == cv_id).first():
        raise HTTPException(status_code=404, detail="CV를 찾을 수 없습니다.")
    if not version_numbers:
        return 0
    archived = (
        db.query(CVHistoryArchive)
        .filter(
            CVHistoryArchive.cv_id == cv_id,
            CVHistoryArchive.version_number.in_(version_numbers),
        )
        .all()
    )
    for row in archived:
        db.add(
            CVHistory(
                cv_id=row.cv_id,
                user_id=row.user_id,
                version_number=row.version_number,
                snapshot=row.snapshot,
                created_at=row.created_at,
            )
        )
        db.delete(row)
    db.commit()
    if archived:
        logger.info("[archive] cv_id=%s restored %s version(s)", cv_id, len(archived))
    return len(archived)
