import enum

from sqlalchemy import Column, String, DateTime, Integer, Text
from sqlalchemy.sql import func

from baronda.core.database import Base


class AnnouncementTarget(str, enum.Enum):
    all = "all"
    users = "users"
    staff = "staff"


class Announcement(Base):
    __tablename__ = "announcements"

    id = Column(String(36), primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    content = Column(Text, nullable=False)
    target = Column(String(10), nullable=False, default=AnnouncementTarget.all.value)
    likes = Column(Integer, default=0, nullable=False)
    dislikes = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
