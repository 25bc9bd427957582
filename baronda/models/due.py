from sqlalchemy import Column, String, DateTime, Integer, Text, ForeignKey
from sqlalchemy.sql import func

from baronda.core.database import Base


class Due(Base):
    """Monthly resident dues (iuran) payment."""

    __tablename__ = "dues"

    id = Column(String(36), primary_key=True, index=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    payer_name = Column(String(100), nullable=False)
    amount = Column(Integer, nullable=False)  # rupiah
    month = Column(String(20), nullable=False)
    year = Column(Integer, nullable=False)
    payment_date = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    recorded_by_id = Column(String(36), nullable=True)
    recorded_by_name = Column(String(100), nullable=True)
    notes = Column(Text, nullable=True)
