"""CV 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

CVItem = Dict[str, Any]


class CVBase(BaseModel):
    full_name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    education: List[CVItem] = []
    academic_employment: List[CVItem] = []
    teaching: List[CVItem] = []
    courses: List[CVItem] = []
    publications_research: List[CVItem] = []
    publications_books: List[CVItem] = []
    conference_presentations: List[CVItem] = []
    professional_service: List[CVItem] = []
    internal_activities: List[CVItem] = []


class CVSave(CVBase):
    pass


class CVOut(CVBase):
    cv_id: int
    user_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class CVSaveResult(BaseModel):
    cv: CVOut
    version_number: int


class ScoresOut(BaseModel):
    total_points: float
    intellectual_score: float
    professional_score: float
    course_score: float


class CVScoresOut(ScoresOut):
    cv_id: int


class CVSummaryOut(ScoresOut):
    cv_id: int
    user_id: int
    full_name: Optional[str] = None
    email: Optional[str] = None
    updated_at: Optional[datetime] = None
    section_counts: Dict[str, int]


class CVListOut(BaseModel):
    items: List[CVSummaryOut]
    total_count: int
    page: int
    page_size: int
    total_pages: int
