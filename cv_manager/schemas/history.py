"""CV 버전 이력/변경 내역/보관 요청·응답 계약을 위한 Pydantic 스키마입니다."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class CVHistoryOut(BaseModel):
    history_id: int
    cv_id: int
    user_id: int
    version_number: int
    created_at: Optional[datetime] = None
    snapshot: Dict[str, Any]


class ChangeLogEntry(BaseModel):
    created_at: Optional[datetime] = None
    description: str


class ArchiveRunResult(BaseModel):
    archived_by_count: int
    archived_by_date: int
    total_archived: int


class ArchiveStats(BaseModel):
    main_count: int
    archive_count: int


class ArchiveRestoreRequest(BaseModel):
    version_numbers: List[int]


class ArchiveRestoreResult(BaseModel):
    restored: int
