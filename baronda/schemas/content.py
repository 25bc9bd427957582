from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from baronda.models.announcement import AnnouncementTarget


class AnnouncementCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=1)
    target: AnnouncementTarget = AnnouncementTarget.all


class AnnouncementUpdate(BaseModel):
    title: Optional[str] = Field(default=None, max_length=200)
    content: Optional[str] = None
    target: Optional[AnnouncementTarget] = None


class AnnouncementResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    title: str
    content: str
    target: str
    likes: int
    dislikes: int
    created_at: Optional[datetime] = None


class AnnouncementReaction(BaseModel):
    reaction: str = Field(pattern="^(like|dislike)$")


class NotificationCreate(BaseModel):
    recipient: str = Field(min_length=1, max_length=36)
    title: str = Field(min_length=1, max_length=200)
    message: str = Field(min_length=1)
    link: Optional[str] = None


class NotificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    recipient: str
    title: str
    message: str
    link: Optional[str] = None
    read: bool
    created_at: Optional[datetime] = None


class EmergencyContactCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    number: str = Field(min_length=1, max_length=32)
    type: str = Field(default="other", pattern="^(police|fire|medical|other)$")


class EmergencyContactResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    name: str
    number: str
    type: str


class AppSettingUpdate(BaseModel):
    value: Any = None


class AppSettingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    key: str
    value: Any = None
    updated_at: Optional[datetime] = None


class ShortLinkCreate(BaseModel):
    slug: str = Field(min_length=1, max_length=64, pattern="^[A-Za-z0-9_-]+$")
    target_url: str = Field(min_length=1, max_length=1024)


class ShortLinkResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    slug: str
    target_url: str
    clicks: int
    created_at: Optional[datetime] = None
