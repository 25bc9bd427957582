"""One-time password issue and redemption.

Policy: every code lives ``OTP_EXPIRE_MINUTES`` (10) minutes and issuing a new
code deletes all earlier codes for the same email and context, so at most one
code per (email, context) is ever outstanding. A record flips from
``used=False`` to ``used=True`` exactly once; expired records are left in place
and swept by ``purge_expired_otps``.

Contexts outside ``PUBLIC_OTP_CONTEXTS`` must be issued with ``requested_by``
(the signed-in account) and only verify for that same account.
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, Optional

from sqlalchemy.orm import Session

from baronda.core.config import settings
from baronda.core.errors import FlowReason, FlowResult
from baronda.core.security import generate_otp_code, hash_otp_code
from baronda.core.timeutil import ensure_utc, utcnow
from baronda.models.otp import PUBLIC_OTP_CONTEXTS, OtpContext, OtpRecord
from baronda.services import email as mail

logger = logging.getLogger(__name__)

MSG_SENT = "Kode OTP berhasil dikirim."
MSG_SEND_FAILED = "Gagal mengirim kode OTP. Silakan coba lagi nanti."
MSG_VERIFIED = "Kode OTP berhasil diverifikasi."
MSG_INVALID = "Kode OTP tidak valid."
MSG_USED = "Kode OTP sudah digunakan."
MSG_EXPIRED = "Kode OTP sudah kedaluwarsa."
MSG_LOCKED = "Terlalu banyak percobaan. Silakan minta kode OTP baru."


def mask_email(addr: str) -> str:
    try:
        local, domain = addr.split("@", 1)
    except ValueError:
        return addr
    local_mask = local[0] + "***" if len(local) > 1 else "*"
    dot = domain.rfind(".")
    if dot > 0:
        return f"{local_mask}@{domain[0]}***{domain[dot:]}"
    return f"{local_mask}@{domain[0]}***"


def normalize_email(addr: str) -> str:
    return (addr or "").strip().lower()


def _context_value(context) -> str:
    return context.value if isinstance(context, OtpContext) else str(context)


def _is_account_bound(ctx: str) -> bool:
    return ctx not in {c.value for c in PUBLIC_OTP_CONTEXTS}


@dataclass
class OtpService:
    db: Session
    expire_minutes: int = field(default_factory=lambda: settings.OTP_EXPIRE_MINUTES)
    max_attempts: int = field(default_factory=lambda: settings.OTP_MAX_ATTEMPTS)
    clock: Callable[[], datetime] = utcnow
    code_factory: Callable[[], str] = generate_otp_code

    def issue(self, email: str, context, requested_by: Optional[str] = None) -> FlowResult:
        """Create a fresh code for (email, context), replacing older ones, and email it."""
        email = normalize_email(email)
        ctx = _context_value(context)
        if _is_account_bound(ctx) and not requested_by:
            return FlowResult.fail(FlowReason.forbidden, "Kode OTP ini hanya dapat diminta dari akun yang sedang masuk.")
        now = self.clock()
        code = self.code_factory()
        expires_at = now + timedelta(minutes=self.expire_minutes)

        self.db.query(OtpRecord).filter(
            OtpRecord.email == email,
            OtpRecord.context == ctx,
        ).delete(synchronize_session=False)

        record = OtpRecord(
            id=str(uuid.uuid4()),
            email=email,
            code_hash=hash_otp_code(code),
            context=ctx,
            created_at=now,
            expires_at=expires_at,
            used=False,
            attempts=0,
            requested_by=requested_by,
        )
        self.db.add(record)
        self.db.commit()

        logger.info("OTP issued for %s (context=%s, expires in %s min)", mask_email(email), ctx, self.expire_minutes)
        sent = mail.send_otp_email(email, code, ctx, self.expire_minutes)
        if not sent:
            return FlowResult.fail(FlowReason.delivery_failed, MSG_SEND_FAILED, otp_id=record.id)
        return FlowResult.ok(MSG_SENT, otp_id=record.id, code=code, expires_at=expires_at)

    def verify(self, email: str, code: str, context=None, requested_by: Optional[str] = None) -> FlowResult:
        """Redeem a code. Never raises for a bad code; the reason is in the result."""
        email = normalize_email(email)
        code = (code or "").strip()
        now = self.clock()

        record = None
        if len(code) == 6 and code.isdigit():
            q = self.db.query(OtpRecord).filter(
                OtpRecord.email == email,
                OtpRecord.code_hash == hash_otp_code(code),
            )
            if context is not None:
                q = q.filter(OtpRecord.context == _context_value(context))
            record = q.order_by(OtpRecord.created_at.desc()).first()
        if record is not None and _is_account_bound(record.context) and record.requested_by != requested_by:
            record = None

        if record is None:
            self._count_failed_attempt(email, context)
            return FlowResult.fail(FlowReason.invalid_code, MSG_INVALID)
        if record.used:
            return FlowResult.fail(FlowReason.already_used, MSG_USED)
        if record.attempts >= self.max_attempts:
            return FlowResult.fail(FlowReason.too_many_attempts, MSG_LOCKED)
        if ensure_utc(record.expires_at) < now:
            return FlowResult.fail(FlowReason.expired, MSG_EXPIRED)

        if not self._redeem(record, now):
            return FlowResult.fail(FlowReason.already_used, MSG_USED)

        logger.info("OTP verified for %s (context=%s)", mask_email(email), record.context)
        return FlowResult.ok(MSG_VERIFIED, otp_id=record.id, context=record.context)

    def _redeem(self, record: OtpRecord, now: datetime) -> bool:
        """Conditional update: only one concurrent redeemer can flip the flag."""
        changed = (
            self.db.query(OtpRecord)
            .filter(OtpRecord.id == record.id, OtpRecord.used.is_(False))
            .update({OtpRecord.used: True, OtpRecord.used_at: now}, synchronize_session=False)
        )
        self.db.commit()
        return changed == 1

    def _count_failed_attempt(self, email: str, context) -> None:
        q = self.db.query(OtpRecord).filter(OtpRecord.email == email, OtpRecord.used.is_(False))
        if context is not None:
            q = q.filter(OtpRecord.context == _context_value(context))
        outstanding = q.order_by(OtpRecord.created_at.desc()).first()
        if outstanding is None:
            return
        outstanding.attempts = (outstanding.attempts or 0) + 1
        self.db.commit()
        if outstanding.attempts >= self.max_attempts:
            logger.warning("OTP for %s locked after %s failed attempts", mask_email(email), outstanding.attempts)


def purge_expired_otps(db: Session, now: Optional[datetime] = None) -> int:
    """Delete records whose expiry has passed. Returns the number removed."""
    now = now or utcnow()
    expired_ids = [
        r.id
        for r in db.query(OtpRecord.id, OtpRecord.expires_at).all()
        if ensure_utc(r.expires_at) < now
    ]
    if not expired_ids:
        return 0
    db.query(OtpRecord).filter(OtpRecord.id.in_(expired_ids)).delete(synchronize_session=False)
    db.commit()
    logger.info("Purged %s expired OTP records", len(expired_ids))
    return len(expired_ids)
