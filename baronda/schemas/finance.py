from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from baronda.models.honorarium import HonorariumStatus


class DueCreate(BaseModel):
    user_id: str
    amount: int = Field(gt=0)
    month: str = Field(min_length=1, max_length=20)
    year: int = Field(ge=2000, le=2100)
    notes: Optional[str] = None


class DueResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    user_id: str
    payer_name: str
    amount: int
    month: str
    year: int
    payment_date: Optional[datetime] = None
    recorded_by_name: Optional[str] = None
    notes: Optional[str] = None


class HonorariumCreate(BaseModel):
    staff_id: str
    period: str = Field(min_length=1, max_length=50)
    amount: int = Field(gt=0)
    status: HonorariumStatus = HonorariumStatus.pending
    notes: Optional[str] = None


class HonorariumUpdate(BaseModel):
    period: Optional[str] = Field(default=None, max_length=50)
    amount: Optional[int] = Field(default=None, gt=0)
    status: Optional[HonorariumStatus] = None
    notes: Optional[str] = None


class HonorariumResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    staff_id: str
    staff_name: str
    period: str
    amount: int
    status: str
    notes: Optional[str] = None
    issue_date: Optional[datetime] = None
