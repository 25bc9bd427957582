from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from baronda.schemas.auth import AddressFields


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    display_name: str
    email: str
    phone: Optional[str] = None
    address_type: Optional[str] = None
    address_detail: Optional[str] = None
    photo_url: Optional[str] = None
    is_blocked: bool
    block_reason: Optional[str] = None
    block_ends: Optional[datetime] = None
    created_at: Optional[datetime] = None


class UserProfileUpdate(AddressFields):
    display_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    photo_url: Optional[str] = None


class EmailChangeRequest(BaseModel):
    password: str
    new_email: EmailStr


class EmailChangeVerify(BaseModel):
    new_email: EmailStr
    code: str


class UserBlock(BaseModel):
    reason: Optional[str] = None
    starts: Optional[datetime] = None
    ends: Optional[datetime] = None
