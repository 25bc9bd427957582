from datetime import datetime, timedelta, timezone

from baronda.core.errors import FlowReason
from baronda.core.security import verify_password
from baronda.models.staff import Staff, StaffRole, StaffStatus
from baronda.services.access_code import (
    allow_self_or_admin,
    change_access_code,
    cooldown_remaining,
    recover_access_code,
)

from conftest import make_staff

NOW = datetime(2026, 6, 15, 12, 0, tzinfo=timezone.utc)


def _reload(db, staff_id) -> Staff:
    db.expire_all()
    return db.query(Staff).filter(Staff.id == staff_id).one()


def test_change_allowed_when_never_changed(db):
    staff = make_staff(db)

    result = change_access_code(db, staff.id, "KODE1234", "BARU5678", authorize=allow_self_or_admin(staff), now=NOW)

    assert result.success
    staff = _reload(db, staff.id)
    assert verify_password("BARU5678", staff.access_code_hash)
    assert staff.last_code_change_at is not None


def test_change_allowed_after_seven_days(db):
    staff = make_staff(db, last_code_change_at=NOW - timedelta(days=7))

    result = change_access_code(db, staff.id, "KODE1234", "BARU5678", authorize=allow_self_or_admin(staff), now=NOW)

    assert result.success


def test_change_refused_inside_cooldown(db):
    staff = make_staff(db, last_code_change_at=NOW - timedelta(days=6, hours=23))

    result = change_access_code(db, staff.id, "KODE1234", "BARU5678", authorize=allow_self_or_admin(staff), now=NOW)

    assert result.reason == FlowReason.cooldown
    assert verify_password("KODE1234", _reload(db, staff.id).access_code_hash)


def test_wrong_current_code(db):
    staff = make_staff(db)

    result = change_access_code(db, staff.id, "SALAH000", "BARU5678", authorize=allow_self_or_admin(staff), now=NOW)

    assert result.reason == FlowReason.wrong_code
    assert result.message == "Kode akses saat ini salah."


def test_wrong_code_is_reported_before_cooldown(db):
    staff = make_staff(db, last_code_change_at=NOW - timedelta(days=1))

    result = change_access_code(db, staff.id, "SALAH000", "BARU5678", authorize=allow_self_or_admin(staff), now=NOW)

    assert result.reason == FlowReason.wrong_code


def test_other_staff_cannot_change_code(db):
    target = make_staff(db)
    other = make_staff(db, email="lain@example.com")

    result = change_access_code(db, target.id, "KODE1234", "BARU5678", authorize=allow_self_or_admin(other), now=NOW)

    assert result.reason == FlowReason.forbidden


def test_admin_may_change_any_code(db):
    target = make_staff(db)
    admin = make_staff(db, email="admin@example.com", role=StaffRole.admin)

    result = change_access_code(db, target.id, "KODE1234", "BARU5678", authorize=allow_self_or_admin(admin), now=NOW)

    assert result.success


def test_unknown_staff(db):
    admin = make_staff(db, email="admin@example.com", role=StaffRole.admin)

    result = change_access_code(db, "missing", "KODE1234", authorize=allow_self_or_admin(admin), now=NOW)

    assert result.reason == FlowReason.not_found


def test_reset_generates_and_emails_code(db, outbox):
    staff = make_staff(db)

    result = change_access_code(db, staff.id, "KODE1234", authorize=allow_self_or_admin(staff), now=NOW)

    assert result.success
    mailed = outbox.last_code("petugas@example.com")
    assert len(mailed) == 8 and mailed.isalnum() and mailed.upper() == mailed
    assert verify_password(mailed, _reload(db, staff.id).access_code_hash)


def test_reset_obeys_cooldown(db, outbox):
    staff = make_staff(db, last_code_change_at=NOW - timedelta(days=2))

    result = change_access_code(db, staff.id, "KODE1234", authorize=allow_self_or_admin(staff), now=NOW)

    assert result.reason == FlowReason.cooldown
    assert outbox.to("petugas@example.com") == []


def test_cooldown_remaining():
    staff = Staff(last_code_change_at=NOW - timedelta(days=5))

    assert cooldown_remaining(staff, NOW, 7) == timedelta(days=2)
    assert cooldown_remaining(Staff(last_code_change_at=None), NOW, 7) == timedelta(0)


def test_recovery_ignores_cooldown(db, outbox):
    staff = make_staff(db, last_code_change_at=NOW - timedelta(days=1))

    result = recover_access_code(db, "petugas@example.com", NOW)

    assert result.success
    assert verify_password(outbox.last_code("petugas@example.com"), _reload(db, staff.id).access_code_hash)


def test_recovery_requires_active_staff(db):
    make_staff(db, status=StaffStatus.suspended)

    result = recover_access_code(db, "petugas@example.com", NOW)

    assert result.reason == FlowReason.not_found
