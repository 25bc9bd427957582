import re
from datetime import datetime, timedelta, timezone

from baronda.core.errors import FlowReason
from baronda.core.timeutil import ensure_utc
from baronda.models.otp import OtpContext, OtpRecord
from baronda.services.otp import OtpService, mask_email, purge_expired_otps

T0 = datetime(2026, 5, 1, 8, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, now: datetime = T0):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


def _service(db, clock=None, code="482913"):
    return OtpService(db, clock=clock or FakeClock(), code_factory=lambda: code)


def test_issue_yields_six_digit_code_with_future_expiry(db, outbox):
    result = OtpService(db).issue("a@example.com", OtpContext.user_registration)

    assert result.success
    assert re.fullmatch(r"\d{6}", result.data["code"])
    record = db.query(OtpRecord).one()
    assert ensure_utc(record.expires_at) > ensure_utc(record.created_at)
    assert record.code_hash != result.data["code"]
    assert outbox.last_otp("a@example.com") == result.data["code"]


def test_correct_code_verifies_once(db):
    service = _service(db)
    service.issue("a@example.com", OtpContext.user_registration)

    first = service.verify("a@example.com", "482913")
    second = service.verify("a@example.com", "482913")

    assert first.success
    assert not second.success
    assert second.reason == FlowReason.already_used
    assert second.message == "Kode OTP sudah digunakan."


def test_wrong_code_is_invalid_and_marks_nothing_used(db):
    service = _service(db)
    service.issue("a@example.com", OtpContext.user_registration)

    result = service.verify("a@example.com", "111111")

    assert not result.success
    assert result.reason == FlowReason.invalid_code
    assert result.message == "Kode OTP tidak valid."
    assert db.query(OtpRecord).filter(OtpRecord.used.is_(True)).count() == 0


def test_unused_code_expires(db):
    clock = FakeClock()
    service = _service(db, clock)
    service.issue("a@example.com", OtpContext.user_registration)

    clock.advance(minutes=10, seconds=1)
    result = service.verify("a@example.com", "482913")

    assert result.reason == FlowReason.expired


def test_verify_just_before_expiry_then_again_at_expiry(db):
    clock = FakeClock()
    service = _service(db, clock)
    service.issue("a@example.com", OtpContext.user_registration)

    clock.advance(minutes=9, seconds=59)
    assert service.verify("a@example.com", "482913").success

    clock.now = T0 + timedelta(minutes=10)
    again = service.verify("a@example.com", "482913")
    assert again.reason == FlowReason.already_used


def test_context_must_match_when_given(db):
    service = _service(db)
    service.issue("a@example.com", OtpContext.user_password_reset)

    result = service.verify("a@example.com", "482913", OtpContext.user_registration)

    assert result.reason == FlowReason.invalid_code
    assert service.verify("a@example.com", "482913", OtpContext.user_password_reset).success


def test_reissue_replaces_earlier_code_for_same_context(db):
    codes = iter(["111111", "222222"])
    service = OtpService(db, clock=FakeClock(), code_factory=lambda: next(codes))
    service.issue("a@example.com", OtpContext.user_registration)
    service.issue("a@example.com", OtpContext.user_registration)

    assert db.query(OtpRecord).count() == 1
    assert service.verify("a@example.com", "111111").reason == FlowReason.invalid_code
    assert service.verify("a@example.com", "222222").success


def test_codes_for_other_contexts_survive_reissue(db):
    service = _service(db)
    service.issue("a@example.com", OtpContext.user_registration)
    service.issue("a@example.com", OtpContext.email_change, requested_by="user-1")

    assert db.query(OtpRecord).count() == 2


def test_account_bound_code_needs_a_requester(db, outbox):
    result = _service(db).issue("a@example.com", OtpContext.email_change)

    assert result.reason == FlowReason.forbidden
    assert db.query(OtpRecord).count() == 0
    assert outbox.to("a@example.com") == []


def test_account_bound_code_only_verifies_for_its_requester(db):
    service = _service(db)
    service.issue("a@example.com", OtpContext.email_change, requested_by="user-1")

    assert service.verify("a@example.com", "482913", OtpContext.email_change).reason == FlowReason.invalid_code
    assert (
        service.verify("a@example.com", "482913", OtpContext.email_change, requested_by="user-2").reason
        == FlowReason.invalid_code
    )
    assert service.verify("a@example.com", "482913", OtpContext.email_change, requested_by="user-1").success


class RacingOtpService(OtpService):
    """Another redeemer flips ``used`` between the checks and the conditional update."""

    def _redeem(self, record, now):
        self.db.query(OtpRecord).filter(OtpRecord.id == record.id).update(
            {OtpRecord.used: True}, synchronize_session=False
        )
        return super()._redeem(record, now)


def test_losing_a_concurrent_redeem_reports_already_used(db):
    _service(db).issue("a@example.com", OtpContext.user_registration)
    racing = RacingOtpService(db, clock=FakeClock())

    result = racing.verify("a@example.com", "482913")

    assert result.reason == FlowReason.already_used
    assert result.message == "Kode OTP sudah digunakan."


def test_repeated_failures_lock_the_code(db):
    service = OtpService(db, clock=FakeClock(), code_factory=lambda: "482913", max_attempts=3)
    service.issue("a@example.com", OtpContext.user_registration)

    for _ in range(3):
        assert service.verify("a@example.com", "000000").reason == FlowReason.invalid_code

    result = service.verify("a@example.com", "482913")
    assert result.reason == FlowReason.too_many_attempts


def test_mail_failure_keeps_record(db, failing_mail):
    result = _service(db).issue("a@example.com", OtpContext.user_registration)

    assert not result.success
    assert result.reason == FlowReason.delivery_failed
    assert db.query(OtpRecord).count() == 1


def test_email_is_normalised(db):
    service = _service(db)
    service.issue("  A@Example.COM ", OtpContext.user_registration)

    assert service.verify("a@example.com", "482913").success


def test_purge_removes_only_expired_records(db):
    clock = FakeClock()
    service = _service(db, clock)
    service.issue("old@example.com", OtpContext.user_registration)
    clock.advance(minutes=8)
    service.issue("new@example.com", OtpContext.user_registration)

    removed = purge_expired_otps(db, T0 + timedelta(minutes=11))

    assert removed == 1
    assert [r.email for r in db.query(OtpRecord).all()] == ["new@example.com"]


def test_mask_email():
    assert mask_email("budi@example.com") == "b***@e***.com"
    assert mask_email("not-an-email") == "not-an-email"
