import enum

from sqlalchemy import Column, String, DateTime, Integer, Text, ForeignKey
from sqlalchemy.sql import func

from baronda.core.database import Base


class HonorariumStatus(str, enum.Enum):
    paid = "Dibayarkan"
    pending = "Tertunda"
    deducted = "Dipotong"
    cancelled = "Batal"


class Honorarium(Base):
    __tablename__ = "honorariums"

    id = Column(String(36), primary_key=True, index=True)
    staff_id = Column(String(36), ForeignKey("staff.id", ondelete="CASCADE"), nullable=False, index=True)
    staff_name = Column(String(100), nullable=False)
    period = Column(String(50), nullable=False)  # e.g. "Juli 2025"
    amount = Column(Integer, nullable=False)
    status = Column(String(20), nullable=False, default=HonorariumStatus.pending.value)
    notes = Column(Text, nullable=True)
    issue_date = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
