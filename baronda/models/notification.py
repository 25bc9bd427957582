from sqlalchemy import Column, String, DateTime, Boolean, Text
from sqlalchemy.sql import func

from baronda.core.database import Base

ALL_USERS = "all_users"
ALL_STAFF = "all_staff"


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, index=True)
    # user id, staff id, or one of the broadcast keys above
    recipient = Column(String(36), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    link = Column(String(512), nullable=True)
    read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
