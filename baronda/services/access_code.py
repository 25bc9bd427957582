"""Staff access-code lifecycle.

``change_access_code`` is the only place an existing code is replaced by its
holder or an admin; both the self-service change and the reset-and-email path
go through it and share the same current-code and cooldown checks.
"""

import logging
from datetime import datetime, timedelta
from typing import Callable, Optional

from sqlalchemy.orm import Session

from baronda.core.config import settings
from baronda.core.errors import FlowReason, FlowResult
from baronda.core.security import generate_access_code, get_password_hash, verify_password
from baronda.core.timeutil import ensure_utc, utcnow
from baronda.models.staff import Staff, StaffStatus
from baronda.services import email as mail

logger = logging.getLogger(__name__)

Authorizer = Callable[[Staff], bool]

MSG_NOT_FOUND = "Data staf tidak ditemukan."
MSG_FORBIDDEN = "Anda tidak berwenang mengubah kode akses staf ini."
MSG_WRONG_CODE = "Kode akses saat ini salah."
MSG_CHANGED = "Kode akses berhasil diubah."
MSG_RESET = "Kode akses berhasil diubah dan telah dikirim ke email Anda."
MSG_RESET_MAIL_FAILED = "Kode akses berhasil diubah, tetapi email gagal dikirim. Hubungi admin."


def _cooldown_message(days: int) -> str:
    return f"Anda baru bisa mengubah kode akses lagi setelah {days} hari dari perubahan terakhir."


def allow_self_or_admin(actor: Staff) -> Authorizer:
    """Staff may change their own code; admins may change anyone's."""

    def authorize(target: Staff) -> bool:
        return actor.id == target.id or actor.is_admin

    return authorize


def cooldown_remaining(staff: Staff, now: datetime, cooldown_days: Optional[int] = None) -> timedelta:
    """Time left before the code may change again; zero when allowed."""
    days = settings.ACCESS_CODE_COOLDOWN_DAYS if cooldown_days is None else cooldown_days
    last = ensure_utc(staff.last_code_change_at)
    if last is None:
        return timedelta(0)
    remaining = last + timedelta(days=days) - now
    return remaining if remaining > timedelta(0) else timedelta(0)


def set_access_code(staff: Staff, code: str, now: datetime) -> None:
    staff.access_code_hash = get_password_hash(code)
    staff.last_code_change_at = now


def change_access_code(
    db: Session,
    staff_id: str,
    current_code: str,
    new_code: Optional[str] = None,
    *,
    authorize: Authorizer,
    now: Optional[datetime] = None,
    cooldown_days: Optional[int] = None,
) -> FlowResult:
    """
    Replace a staff member's access code.
    With ``new_code`` the caller picks the code; without it a random code is
    generated and emailed to the staff member (reset).
    """
    now = now or utcnow()
    days = settings.ACCESS_CODE_COOLDOWN_DAYS if cooldown_days is None else cooldown_days

    staff = db.query(Staff).filter(Staff.id == staff_id).first()
    if not staff:
        return FlowResult.fail(FlowReason.not_found, MSG_NOT_FOUND)
    if not authorize(staff):
        return FlowResult.fail(FlowReason.forbidden, MSG_FORBIDDEN)
    if not verify_password(current_code or "", staff.access_code_hash):
        return FlowResult.fail(FlowReason.wrong_code, MSG_WRONG_CODE)
    if cooldown_remaining(staff, now, days) > timedelta(0):
        return FlowResult.fail(FlowReason.cooldown, _cooldown_message(days))

    generated = new_code is None
    code = generate_access_code() if generated else new_code
    set_access_code(staff, code, now)
    db.commit()
    logger.info("Access code changed for staff %s (generated=%s)", staff.id, generated)

    if not generated:
        return FlowResult.ok(MSG_CHANGED)
    if not mail.send_access_code_email(staff.email, staff.name, code, updated=True):
        return FlowResult.fail(FlowReason.delivery_failed, MSG_RESET_MAIL_FAILED)
    return FlowResult.ok(MSG_RESET)


def recover_access_code(db: Session, email: str, now: Optional[datetime] = None) -> FlowResult:
    """
    Issue a fresh code to an active staff member who proved ownership of their
    email with an OTP. Codes are stored hashed, so the old one cannot be resent.
    """
    now = now or utcnow()
    staff = (
        db.query(Staff)
        .filter(Staff.email == email.strip().lower(), Staff.status == StaffStatus.active)
        .first()
    )
    if not staff:
        return FlowResult.fail(FlowReason.not_found, "Tidak ada akun petugas aktif yang terdaftar dengan email ini.")
    code = generate_access_code()
    set_access_code(staff, code, now)
    db.commit()
    logger.info("Access code recovered for staff %s", staff.id)
    if not mail.send_access_code_email(staff.email, staff.name, code, updated=True):
        return FlowResult.fail(FlowReason.delivery_failed, MSG_RESET_MAIL_FAILED)
    return FlowResult.ok("Verifikasi berhasil. Kode akses baru Anda telah dikirim ke email.")
