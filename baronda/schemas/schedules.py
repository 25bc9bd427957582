import datetime as dt
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from baronda.models.schedule import ScheduleStatus


class ScheduleCreate(BaseModel):
    date: dt.date
    time: str = Field(min_length=1, max_length=32)
    officer_id: str
    area: str = Field(min_length=1, max_length=100)


class ScheduleUpdate(BaseModel):
    date: Optional[dt.date] = None
    time: Optional[str] = Field(default=None, max_length=32)
    officer_id: Optional[str] = None
    area: Optional[str] = Field(default=None, max_length=100)
    status: Optional[ScheduleStatus] = None


class ScheduleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    date: dt.date
    time: str
    officer_id: Optional[str] = None
    officer_name: str
    area: str
    status: str
    reason: Optional[str] = None
    created_at: Optional[dt.datetime] = None


class ScheduleTokenResponse(BaseModel):
    token: str
    expires_at: dt.datetime


class ScheduleCheckIn(BaseModel):
    token: str


class ScheduleOfficerStatus(BaseModel):
    status: ScheduleStatus
    reason: Optional[str] = None
