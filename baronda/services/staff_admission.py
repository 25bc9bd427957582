"""Staff admission: pending -> active, pending -> deleted, active <-> suspended.

A suspended account stays suspended after ``suspension_end_date`` passes; the
date is only reported back to the caller. Reactivation is an explicit admin
action.
"""

import logging
import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from baronda.core.errors import FlowReason, FlowResult
from baronda.core.security import generate_access_code, get_password_hash, verify_password
from baronda.core.timeutil import ensure_utc, utcnow
from baronda.models.staff import Staff, StaffRole, StaffStatus
from baronda.services import email as mail
from baronda.services.audit import record_admin_action

logger = logging.getLogger(__name__)

MSG_NOT_FOUND = "Data staf tidak ditemukan atau mungkin telah kedaluwarsa."
MSG_LOGIN_FAILED = "Email atau kode akses salah."
MSG_PENDING = "Akun Anda sedang menunggu persetujuan admin."


def title_case(name: str) -> str:
    return " ".join(part.capitalize() for part in (name or "").split())


def normalize_address(address_type: Optional[str], address_detail: Optional[str]) -> Optional[str]:
    if address_type == "kilongan":
        return "Kilongan"
    return address_detail


def create_pending_staff(
    db: Session,
    *,
    name: str,
    email: str,
    phone: Optional[str],
    address_type: Optional[str],
    address_detail: Optional[str],
) -> FlowResult:
    email = email.strip().lower()
    if db.query(Staff).filter(Staff.email == email).first():
        return FlowResult.fail(FlowReason.conflict, "Email ini sudah terdaftar sebagai petugas.")
    staff = Staff(
        id=str(uuid.uuid4()),
        name=title_case(name),
        email=email,
        phone=phone,
        address_type=address_type,
        address_detail=normalize_address(address_type, address_detail),
        role=StaffRole.petugas,
        status=StaffStatus.pending,
        points=0,
    )
    db.add(staff)
    db.commit()
    logger.info("Staff registration %s pending approval", staff.id)
    return FlowResult.ok(
        "Pendaftaran berhasil. Akun Anda akan ditinjau oleh admin.",
        staff_id=staff.id,
    )


def approve_staff(db: Session, staff_id: str, actor: Optional[Staff] = None) -> FlowResult:
    """Activate a pending registration and email the first access code."""
    staff = db.query(Staff).filter(Staff.id == staff_id).first()
    if not staff:
        return FlowResult.fail(FlowReason.not_found, MSG_NOT_FOUND)
    if staff.status != StaffStatus.pending:
        return FlowResult.fail(FlowReason.conflict, f"{staff.name} tidak sedang menunggu persetujuan.")

    code = generate_access_code()
    staff.status = StaffStatus.active
    staff.points = 0
    staff.access_code_hash = get_password_hash(code)
    record_admin_action(db, actor, "staff.approve", "staff", staff.id, {"email": staff.email})
    db.commit()

    if not mail.send_staff_approved_email(staff.email, staff.name, code):
        return FlowResult.fail(
            FlowReason.delivery_failed,
            f"{staff.name} telah disetujui, tetapi email kode akses gagal dikirim.",
        )
    return FlowResult.ok(f"{staff.name} telah disetujui.")


def reject_staff(db: Session, staff_id: str, reason: Optional[str], actor: Optional[Staff] = None) -> FlowResult:
    """Delete a pending registration and tell the applicant why."""
    if not reason or not reason.strip():
        return FlowResult.fail(FlowReason.invalid, "Alasan penolakan harus diisi.")
    staff = db.query(Staff).filter(Staff.id == staff_id).first()
    if not staff:
        return FlowResult.fail(FlowReason.not_found, MSG_NOT_FOUND)
    if staff.status != StaffStatus.pending:
        return FlowResult.fail(FlowReason.conflict, f"{staff.name} tidak sedang menunggu persetujuan.")

    name, email_addr = staff.name, staff.email
    db.delete(staff)
    record_admin_action(db, actor, "staff.reject", "staff", staff_id, {"email": email_addr, "reason": reason})
    db.commit()

    if not mail.send_staff_rejected_email(email_addr, name, reason.strip()):
        logger.warning("Rejection email to %s was not sent", email_addr)
    return FlowResult.ok(f"Pendaftaran {name} telah ditolak.")


def suspend_staff(
    db: Session,
    staff_id: str,
    *,
    reason: Optional[str] = None,
    until: Optional[datetime] = None,
    actor: Optional[Staff] = None,
) -> FlowResult:
    staff = db.query(Staff).filter(Staff.id == staff_id).first()
    if not staff:
        return FlowResult.fail(FlowReason.not_found, MSG_NOT_FOUND)
    if staff.status != StaffStatus.active:
        return FlowResult.fail(FlowReason.conflict, f"{staff.name} tidak dalam status aktif.")
    if actor is not None and actor.id == staff.id:
        return FlowResult.fail(FlowReason.forbidden, "Anda tidak dapat menangguhkan akun Anda sendiri.")
    staff.status = StaffStatus.suspended
    staff.suspension_reason = reason
    staff.suspension_end_date = until
    record_admin_action(db, actor, "staff.suspend", "staff", staff.id, {"reason": reason, "until": until})
    db.commit()
    return FlowResult.ok(f"{staff.name} telah ditangguhkan.")


def reactivate_staff(db: Session, staff_id: str, actor: Optional[Staff] = None) -> FlowResult:
    staff = db.query(Staff).filter(Staff.id == staff_id).first()
    if not staff:
        return FlowResult.fail(FlowReason.not_found, MSG_NOT_FOUND)
    if staff.status != StaffStatus.suspended:
        return FlowResult.fail(FlowReason.conflict, f"{staff.name} tidak sedang ditangguhkan.")
    staff.status = StaffStatus.active
    staff.suspension_reason = None
    staff.suspension_end_date = None
    record_admin_action(db, actor, "staff.reactivate", "staff", staff.id)
    db.commit()
    return FlowResult.ok(f"{staff.name} telah diaktifkan kembali.")


def login_admission(staff: Staff, now: Optional[datetime] = None) -> FlowResult:
    """Whether a staff member with a correct access code may sign in."""
    now = now or utcnow()
    if staff.status == StaffStatus.pending:
        return FlowResult.fail(FlowReason.pending, MSG_PENDING)
    if staff.status == StaffStatus.suspended:
        end = ensure_utc(staff.suspension_end_date)
        message = "Akun Anda sedang ditangguhkan."
        if end is not None:
            remaining = end - now
            if remaining.total_seconds() > 0:
                message += f" Penangguhan berakhir dalam {remaining.days} hari {remaining.seconds // 3600} jam."
            else:
                message += " Masa penangguhan telah berakhir; hubungi admin untuk pengaktifan kembali."
        return FlowResult.fail(
            FlowReason.suspended,
            message,
            suspension_end_date=end,
            suspension_reason=staff.suspension_reason,
        )
    return FlowResult.ok("Login berhasil.")


def authenticate_staff(db: Session, email: str, access_code: str, now: Optional[datetime] = None) -> FlowResult:
    staff = db.query(Staff).filter(Staff.email == (email or "").strip().lower()).first()
    if not staff or not verify_password(access_code or "", staff.access_code_hash):
        if staff and staff.status == StaffStatus.pending:
            return FlowResult.fail(FlowReason.pending, MSG_PENDING)
        return FlowResult.fail(FlowReason.unauthorized, MSG_LOGIN_FAILED)
    admission = login_admission(staff, now)
    if not admission.success:
        return admission
    return FlowResult.ok(admission.message, staff=staff)
