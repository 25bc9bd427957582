from sqlalchemy import Column, String, DateTime, Boolean, Text
from sqlalchemy.sql import func

from baronda.core.database import Base


class User(Base):
    """A resident (warga) account."""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, index=True)
    display_name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    phone = Column(String(32), nullable=True)
    address_type = Column(String(20), nullable=True)  # kilongan, luar_kilongan
    address_detail = Column(String(255), nullable=True)
    photo_url = Column(String(512), nullable=True)
    is_blocked = Column(Boolean, default=False, nullable=False)
    block_reason = Column(Text, nullable=True)
    block_starts = Column(DateTime(timezone=True), nullable=True)
    block_ends = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
