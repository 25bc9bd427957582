import enum

from sqlalchemy import Column, String, DateTime, Integer, Enum, Text
from sqlalchemy.sql import func

from baronda.core.database import Base


class StaffRole(str, enum.Enum):
    petugas = "petugas"
    bendahara = "bendahara"
    admin = "admin"
    super_admin = "super_admin"


class StaffStatus(str, enum.Enum):
    pending = "pending"
    active = "active"
    suspended = "suspended"


ADMIN_ROLES = (StaffRole.admin, StaffRole.super_admin)


class Staff(Base):
    __tablename__ = "staff"

    id = Column(String(36), primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    phone = Column(String(32), nullable=True)
    address_type = Column(String(20), nullable=True)  # kilongan, luar_kilongan
    address_detail = Column(String(255), nullable=True)
    role = Column(Enum(StaffRole), default=StaffRole.petugas, nullable=False, index=True)
    status = Column(Enum(StaffStatus), default=StaffStatus.pending, nullable=False, index=True)
    suspension_reason = Column(Text, nullable=True)
    suspension_end_date = Column(DateTime(timezone=True), nullable=True)
    # bcrypt hash; null until approval issues the first code
    access_code_hash = Column(String(255), nullable=True)
    last_code_change_at = Column(DateTime(timezone=True), nullable=True)
    points = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES
