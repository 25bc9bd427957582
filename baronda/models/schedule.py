import enum

from sqlalchemy import Column, String, DateTime, Date, Text, ForeignKey
from sqlalchemy.sql import func

from baronda.core.database import Base


class ScheduleStatus(str, enum.Enum):
    pending = "Pending"
    in_progress = "In Progress"
    completed = "Completed"
    izin = "Izin"
    sakit = "Sakit"


class Schedule(Base):
    __tablename__ = "schedules"

    id = Column(String(36), primary_key=True, index=True)
    date = Column(Date, nullable=False, index=True)
    time = Column(String(32), nullable=False)  # e.g. "22:00 - 04:00"
    officer_id = Column(String(36), ForeignKey("staff.id", ondelete="SET NULL"), nullable=True, index=True)
    officer_name = Column(String(100), nullable=False)
    area = Column(String(100), nullable=False)
    status = Column(String(20), nullable=False, default=ScheduleStatus.pending.value)
    reason = Column(Text, nullable=True)  # for Izin / Sakit
    qr_token = Column(String(64), nullable=True, index=True)
    qr_token_expires = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
