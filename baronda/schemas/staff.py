from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from baronda.models.staff import StaffRole, StaffStatus
from baronda.schemas.auth import AddressFields


class StaffResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    name: str
    email: str
    phone: Optional[str] = None
    address_type: Optional[str] = None
    address_detail: Optional[str] = None
    role: StaffRole
    status: StaffStatus
    suspension_reason: Optional[str] = None
    suspension_end_date: Optional[datetime] = None
    last_code_change_at: Optional[datetime] = None
    points: int
    created_at: Optional[datetime] = None


class AccessCodeChange(BaseModel):
    current_code: str
    new_code: str = Field(min_length=6, max_length=32)


class AccessCodeReset(BaseModel):
    current_code: str


class StaffReject(BaseModel):
    reason: str = Field(min_length=1)


class StaffSuspend(BaseModel):
    reason: Optional[str] = None
    until: Optional[datetime] = None


class StaffRoleUpdate(BaseModel):
    role: StaffRole


class AdminInvite(AddressFields):
    name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    role: StaffRole = StaffRole.admin
    code: str = Field(min_length=1, max_length=12)


class AdminVerifyToken(BaseModel):
    token: str = Field(min_length=64, max_length=64)


class AdminLogResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    action: str
    actor_id: Optional[str] = None
    actor_name: Optional[str] = None
    resource_type: Optional[str] = None
    resource_id: Optional[str] = None
    details: Optional[str] = None
    created_at: Optional[datetime] = None


class StaffEmailChangeRequest(BaseModel):
    current_code: str
    new_email: EmailStr
