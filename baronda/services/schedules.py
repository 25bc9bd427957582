"""Patrol schedule check-in tokens and officer status updates."""

import logging
import secrets
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from baronda.core.config import settings
from baronda.core.errors import FlowReason, FlowResult
from baronda.core.timeutil import ensure_utc, utcnow
from baronda.models.schedule import Schedule, ScheduleStatus
from baronda.models.staff import Staff

logger = logging.getLogger(__name__)

MSG_NOT_FOUND = "Jadwal tidak ditemukan."
ABSENCE_STATUSES = (ScheduleStatus.izin, ScheduleStatus.sakit)


def generate_schedule_token(db: Session, schedule_id: str, now: Optional[datetime] = None) -> FlowResult:
    """Store a fresh 32-hex-char check-in token on the schedule."""
    now = now or utcnow()
    schedule = db.query(Schedule).filter(Schedule.id == schedule_id).first()
    if not schedule:
        return FlowResult.fail(FlowReason.not_found, MSG_NOT_FOUND)
    token = secrets.token_hex(16)
    schedule.qr_token = token
    expires_at = now + timedelta(hours=settings.SCHEDULE_TOKEN_EXPIRE_HOURS)
    schedule.qr_token_expires = expires_at
    db.commit()
    return FlowResult.ok("Token jadwal berhasil dibuat.", token=token, expires_at=expires_at)


def check_in(
    db: Session,
    schedule_id: str,
    token: str,
    officer: Staff,
    now: Optional[datetime] = None,
) -> FlowResult:
    now = now or utcnow()
    schedule = db.query(Schedule).filter(Schedule.id == schedule_id).first()
    if not schedule:
        return FlowResult.fail(FlowReason.not_found, MSG_NOT_FOUND)
    if schedule.officer_id and schedule.officer_id != officer.id:
        return FlowResult.fail(FlowReason.forbidden, "Jadwal ini bukan milik Anda.")
    if schedule.status != ScheduleStatus.pending.value:
        return FlowResult.fail(FlowReason.conflict, "Jadwal ini sudah tidak menunggu absensi.")
    if not schedule.qr_token or not token or not secrets.compare_digest(schedule.qr_token, token):
        return FlowResult.fail(FlowReason.invalid_code, "QR Code tidak valid.")
    expires = ensure_utc(schedule.qr_token_expires)
    if expires is None or expires < now:
        return FlowResult.fail(FlowReason.expired, "QR Code sudah kedaluwarsa.")

    schedule.status = ScheduleStatus.in_progress.value
    schedule.qr_token = None
    schedule.qr_token_expires = None
    db.commit()
    logger.info("Officer %s checked in to schedule %s", officer.id, schedule.id)
    return FlowResult.ok("Absensi berhasil. Selamat bertugas!")


def update_officer_status(
    db: Session,
    schedule_id: str,
    officer: Staff,
    new_status: ScheduleStatus,
    reason: Optional[str] = None,
) -> FlowResult:
    """The assigned officer finishes a patrol or reports Izin/Sakit."""
    schedule = db.query(Schedule).filter(Schedule.id == schedule_id).first()
    if not schedule:
        return FlowResult.fail(FlowReason.not_found, MSG_NOT_FOUND)
    if schedule.officer_id != officer.id:
        return FlowResult.fail(FlowReason.forbidden, "Jadwal ini bukan milik Anda.")

    if new_status == ScheduleStatus.completed:
        if schedule.status != ScheduleStatus.in_progress.value:
            return FlowResult.fail(FlowReason.conflict, "Hanya jadwal yang sedang berlangsung yang bisa diselesaikan.")
    elif new_status in ABSENCE_STATUSES:
        if schedule.status != ScheduleStatus.pending.value:
            return FlowResult.fail(FlowReason.conflict, "Izin atau sakit hanya bisa diajukan sebelum bertugas.")
        if not reason or not reason.strip():
            return FlowResult.fail(FlowReason.invalid, "Alasan harus diisi.")
    else:
        return FlowResult.fail(FlowReason.invalid, "Status jadwal tidak valid.")

    schedule.status = new_status.value
    schedule.reason = reason.strip() if reason else None
    db.commit()
    return FlowResult.ok(f"Status jadwal diperbarui menjadi {new_status.value}.")
