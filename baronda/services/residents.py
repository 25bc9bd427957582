"""Resident (warga) accounts: registration after OTP, login, password reset, email change."""

import hashlib
import logging
import uuid
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from baronda.core.config import settings
from baronda.core.errors import FlowReason, FlowResult
from baronda.core.security import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)
from baronda.core.timeutil import ensure_utc, utcnow
from baronda.models.user import User
from baronda.services.notifications import notify
from baronda.services.staff_admission import normalize_address, title_case

logger = logging.getLogger(__name__)

PASSWORD_RESET_PURPOSE = "password_reset"
MSG_RESET_INVALID = "Sesi atur ulang kata sandi tidak valid atau sudah kedaluwarsa."


def register_user(
    db: Session,
    *,
    name: str,
    email: str,
    password: str,
    phone: Optional[str] = None,
    address_type: Optional[str] = None,
    address_detail: Optional[str] = None,
) -> FlowResult:
    """Create the account and a welcome notification. Call only after the OTP is verified."""
    email = email.strip().lower()
    if db.query(User).filter(User.email == email).first():
        return FlowResult.fail(FlowReason.conflict, "Email ini sudah terdaftar. Silakan gunakan email lain.")
    display_name = title_case(name)
    user = User(
        id=str(uuid.uuid4()),
        display_name=display_name,
        email=email,
        hashed_password=get_password_hash(password),
        phone=phone,
        address_type=address_type,
        address_detail=normalize_address(address_type, address_detail) if address_type else None,
        is_blocked=False,
    )
    db.add(user)
    notify(
        db,
        user.id,
        f"Selamat Datang di Baronda, {display_name}!",
        "Terima kasih telah bergabung! Akun Anda telah berhasil dibuat. Mari bersama-sama menjaga "
        "keamanan lingkungan kita. Jelajahi aplikasi untuk melihat pengumuman terbaru dan melaporkan kejadian.",
        link="/profile",
    )
    db.commit()
    logger.info("Resident %s registered", user.id)
    return FlowResult.ok("Registrasi berhasil!", user_id=user.id)


def block_status(user: User, now: datetime) -> FlowResult:
    if not user.is_blocked:
        return FlowResult.ok("")
    ends = ensure_utc(user.block_ends)
    if ends is not None and ends <= now:
        return FlowResult.ok("")
    message = "Akun Anda diblokir."
    if user.block_reason:
        message += f" Alasan: {user.block_reason}."
    return FlowResult.fail(FlowReason.blocked, message, block_ends=ends)


def authenticate_user(db: Session, email: str, password: str, now: Optional[datetime] = None) -> FlowResult:
    now = now or utcnow()
    user = db.query(User).filter(User.email == (email or "").strip().lower()).first()
    if not user or not verify_password(password, user.hashed_password):
        return FlowResult.fail(FlowReason.unauthorized, "Email atau kata sandi salah.")
    blocked = block_status(user, now)
    if not blocked.success:
        return blocked
    return FlowResult.ok("Login berhasil.", user=user)


def _password_fingerprint(user: User) -> str:
    return hashlib.sha256((user.hashed_password or "").encode("utf-8")).hexdigest()[:16]


def create_password_reset_token(user: User) -> str:
    """Short-lived reset token. It stops working once the password it was issued against changes."""
    return create_access_token(
        subject=user.email,
        expires_delta=timedelta(minutes=settings.PASSWORD_RESET_TOKEN_EXPIRE_MINUTES),
        extra_claims={"purpose": PASSWORD_RESET_PURPOSE, "pwh": _password_fingerprint(user)},
    )


def reset_password(db: Session, reset_token: str, new_password: str) -> FlowResult:
    payload = decode_access_token(reset_token)
    if not payload or payload.get("purpose") != PASSWORD_RESET_PURPOSE or "sub" not in payload:
        return FlowResult.fail(FlowReason.expired, MSG_RESET_INVALID)
    user = db.query(User).filter(User.email == payload["sub"]).first()
    if not user:
        return FlowResult.fail(FlowReason.not_found, "Pengguna tidak ditemukan.")
    if payload.get("pwh") != _password_fingerprint(user):
        return FlowResult.fail(FlowReason.expired, MSG_RESET_INVALID)
    user.hashed_password = get_password_hash(new_password)
    db.commit()
    logger.info("Password reset for resident %s", user.id)
    return FlowResult.ok("Kata sandi berhasil diubah.")


def change_email(db: Session, user: User, new_email: str) -> FlowResult:
    new_email = new_email.strip().lower()
    if db.query(User).filter(User.email == new_email, User.id != user.id).first():
        return FlowResult.fail(FlowReason.conflict, "Email ini sudah terdaftar. Silakan gunakan email lain.")
    user.email = new_email
    db.commit()
    return FlowResult.ok("Email berhasil diubah.")
