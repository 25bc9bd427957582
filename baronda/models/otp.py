import enum

from sqlalchemy import Column, String, DateTime, Boolean, Integer
from sqlalchemy.sql import func

from baronda.core.database import Base


class OtpContext(str, enum.Enum):
    user_registration = "userRegistration"
    staff_registration = "staffRegistration"
    staff_reset_access_code = "staffResetAccessCode"
    user_password_reset = "userPasswordReset"
    admin_creation = "adminCreation"
    email_change = "emailChange"


class OtpRecord(Base):
    __tablename__ = "otps"

    id = Column(String(36), primary_key=True, index=True)
    email = Column(String(255), nullable=False, index=True)
    code_hash = Column(String(64), nullable=False, index=True)  # sha256 hex of pepper + code
    context = Column(String(32), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    expires_at = Column(DateTime(timezone=True), nullable=False)
    used = Column(Boolean, default=False, nullable=False)
    used_at = Column(DateTime(timezone=True), nullable=True)
    attempts = Column(Integer, default=0, nullable=False)
    requested_by = Column(String(36), nullable=True)  # staff or user id for codes issued to a signed-in account


# Contexts anyone may request through /api/send-otp. The rest are issued by the
# signed-in flow that owns them and bound to the requesting account.
PUBLIC_OTP_CONTEXTS = frozenset(
    {
        OtpContext.user_registration,
        OtpContext.staff_registration,
        OtpContext.staff_reset_access_code,
        OtpContext.user_password_reset,
    }
)
