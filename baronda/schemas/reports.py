from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from baronda.models.report import ReportCategory, ReportStatus


class ReportCreate(BaseModel):
    reporter_name: Optional[str] = Field(default=None, max_length=100)
    report_text: str = Field(min_length=1)
    category: ReportCategory = ReportCategory.other


class ReportReplyCreate(BaseModel):
    message: str = Field(min_length=1)


class ReportStatusUpdate(BaseModel):
    status: ReportStatus


class ReportReplyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    message: str
    replier_role: str
    created_at: Optional[datetime] = None


class ReportResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    user_id: Optional[str] = None
    reporter_name: str
    report_text: str
    category: str
    status: str
    threat_level: Optional[str] = None
    triage_reason: Optional[str] = None
    created_at: Optional[datetime] = None
    replies: list[ReportReplyResponse] = []
