"""항목 점수 조정/이력/색인 점수 설정 요청·응답 계약을 위한 Pydantic 스키마입니다."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class ItemPointsAdjust(BaseModel):
    section_name: str
    item_index: int
    points: int
    action: str = "add"  # add/subtract
    reason: Optional[str] = None


class ItemPointsBatchRequest(BaseModel):
    changes: List[ItemPointsAdjust]


class ItemPointsBatchResult(BaseModel):
    applied: int


class ItemPointsOut(BaseModel):
    item_points_id: int
    cv_id: int
    section_name: str
    section_display_name: str
    item_index: int
    item_data: Optional[Dict[str, Any]] = None
    item_display_text: str
    points: int
    reason: Optional[str] = None
    admin_id: Optional[int] = None
    updated_at: Optional[datetime] = None


class ItemPointsListOut(BaseModel):
    cv_id: int
    raw_total: int
    items: List[ItemPointsOut]


class ItemPointsHistoryOut(BaseModel):
    history_id: int
    cv_id: int
    section_name: str
    item_index: int
    points_change: int
    reason: Optional[str] = None
    admin_id: Optional[int] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class IndexPointsUpdate(BaseModel):
    points: int


class IndexPointsUpdateResult(BaseModel):
    config: Dict[str, int]
    recalculated: int


class PublicationIndexRequest(BaseModel):
    item_index: int
    index_name: str


class RecalculateResult(BaseModel):
    updated: int
