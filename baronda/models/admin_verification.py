from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func

from baronda.core.database import Base


class AdminVerification(Base):
    """Pending admin account, created once the emailed link is opened."""

    __tablename__ = "admin_verifications"

    token = Column(String(64), primary_key=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    phone = Column(String(32), nullable=True)
    address_type = Column(String(20), nullable=True)
    address_detail = Column(String(255), nullable=True)
    role = Column(String(20), nullable=False, default="admin")
    requested_by_id = Column(String(36), nullable=True)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
