import logging
import secrets
import uuid
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from baronda.core.config import settings
from baronda.core.errors import FlowReason, FlowResult
from baronda.core.security import generate_access_code, get_password_hash
from baronda.core.timeutil import ensure_utc, utcnow
from baronda.models.admin_verification import AdminVerification
from baronda.models.staff import Staff, StaffRole, StaffStatus
from baronda.services import email as mail
from baronda.services.audit import record_admin_action
from baronda.services.staff_admission import normalize_address, title_case

logger = logging.getLogger(__name__)


def send_admin_verification(
    db: Session,
    *,
    name: str,
    email: str,
    phone: Optional[str],
    address_type: Optional[str],
    address_detail: Optional[str],
    role: StaffRole = StaffRole.admin,
    actor: Optional[Staff] = None,
    now: Optional[datetime] = None,
) -> FlowResult:
    """Store the new admin's details behind a one-hour token and email the link."""
    now = now or utcnow()
    email = email.strip().lower()
    if db.query(Staff).filter(Staff.email == email).first():
        return FlowResult.fail(FlowReason.conflict, "Email ini sudah terdaftar sebagai staf.")

    token = secrets.token_hex(32)
    db.query(AdminVerification).filter(AdminVerification.email == email).delete(synchronize_session=False)
    db.add(
        AdminVerification(
            token=token,
            name=title_case(name),
            email=email,
            phone=phone,
            address_type=address_type,
            address_detail=normalize_address(address_type, address_detail),
            role=role.value if isinstance(role, StaffRole) else str(role),
            requested_by_id=actor.id if actor else None,
            expires_at=now + timedelta(minutes=settings.ADMIN_VERIFICATION_EXPIRE_MINUTES),
        )
    )
    record_admin_action(db, actor, "admin.invite", "admin_verification", email)
    db.commit()

    link = f"{settings.FRONTEND_BASE_URL.rstrip('/')}/auth/verify-admin-registration?token={token}"
    if not mail.send_admin_verification_email(email, name, link, settings.ADMIN_VERIFICATION_EXPIRE_MINUTES):
        return FlowResult.fail(FlowReason.delivery_failed, "Gagal mengirim email verifikasi.", token=token)
    return FlowResult.ok("Tautan verifikasi berhasil dikirim.", token=token)


def verify_admin_token(db: Session, token: str, now: Optional[datetime] = None) -> FlowResult:
    """Create the admin account for a valid token; the token is single use."""
    now = now or utcnow()
    pending = db.query(AdminVerification).filter(AdminVerification.token == token).first()
    if not pending:
        return FlowResult.fail(FlowReason.invalid_code, "Token tidak valid atau tidak ditemukan.")
    if ensure_utc(pending.expires_at) < now:
        db.delete(pending)
        db.commit()
        return FlowResult.fail(
            FlowReason.expired,
            "Token sudah kedaluwarsa. Mohon minta Super Admin untuk mendaftar ulang.",
        )
    if db.query(Staff).filter(Staff.email == pending.email).first():
        db.delete(pending)
        db.commit()
        return FlowResult.fail(FlowReason.conflict, "Email ini sudah terdaftar sebagai staf.")

    code = generate_access_code()
    admin = Staff(
        id=str(uuid.uuid4()),
        name=pending.name,
        email=pending.email,
        phone=pending.phone,
        address_type=pending.address_type,
        address_detail=pending.address_detail or "Kilongan",
        role=StaffRole(pending.role),
        status=StaffStatus.active,
        access_code_hash=get_password_hash(code),
        points=0,
    )
    db.add(admin)
    db.delete(pending)
    db.commit()
    logger.info("Admin account %s created from verification link", admin.id)

    if not mail.send_admin_welcome_email(admin.email, admin.name, code):
        return FlowResult.fail(
            FlowReason.delivery_failed,
            f"Admin baru {admin.name} telah dibuat, tetapi email kode akses gagal dikirim.",
        )
    return FlowResult.ok(f"Admin baru {admin.name} telah berhasil dibuat.", staff_id=admin.id)
