from datetime import datetime, timedelta, timezone

from baronda.core.errors import FlowReason
from baronda.core.security import verify_password
from baronda.models.admin_log import AdminLog
from baronda.models.staff import Staff, StaffRole, StaffStatus
from baronda.services import staff_admission

from conftest import make_staff

NOW = datetime(2026, 6, 15, 12, 0, tzinfo=timezone.utc)


def _pending(db):
    result = staff_admission.create_pending_staff(
        db,
        name="  budi   santoso ",
        email="Budi@Example.com",
        phone="08123",
        address_type="kilongan",
        address_detail="ignored",
    )
    assert result.success
    return db.query(Staff).filter(Staff.id == result.data["staff_id"]).one()


def test_registration_creates_pending_staff(db):
    staff = _pending(db)

    assert staff.status == StaffStatus.pending
    assert staff.name == "Budi Santoso"
    assert staff.email == "budi@example.com"
    assert staff.address_detail == "Kilongan"
    assert staff.access_code_hash is None


def test_duplicate_registration_conflicts(db):
    _pending(db)

    result = staff_admission.create_pending_staff(
        db, name="Budi", email="budi@example.com", phone=None, address_type=None, address_detail=None
    )

    assert result.reason == FlowReason.conflict


def test_approval_activates_and_emails_code(db, outbox):
    staff = _pending(db)
    admin = make_staff(db, email="admin@example.com", role=StaffRole.admin)

    result = staff_admission.approve_staff(db, staff.id, admin)

    assert result.success
    db.refresh(staff)
    assert staff.status == StaffStatus.active
    assert staff.points == 0
    assert staff.last_code_change_at is None
    assert verify_password(outbox.last_code("budi@example.com"), staff.access_code_hash)
    assert db.query(AdminLog).filter(AdminLog.action == "staff.approve").count() == 1


def test_only_pending_staff_can_be_approved(db):
    staff = make_staff(db)

    assert staff_admission.approve_staff(db, staff.id).reason == FlowReason.conflict


def test_rejection_requires_reason(db):
    staff = _pending(db)

    result = staff_admission.reject_staff(db, staff.id, "  ")

    assert result.reason == FlowReason.invalid
    assert db.query(Staff).count() == 1


def test_rejection_deletes_and_emails_reason(db, outbox):
    staff = _pending(db)

    result = staff_admission.reject_staff(db, staff.id, "Data tidak lengkap")

    assert result.success
    assert db.query(Staff).count() == 0
    assert "Data tidak lengkap" in outbox.to("budi@example.com")[-1].html


def test_pending_staff_cannot_log_in(db):
    _pending(db)

    result = staff_admission.authenticate_staff(db, "budi@example.com", "anything", NOW)

    assert result.reason == FlowReason.pending


def test_active_staff_logs_in(db):
    make_staff(db)

    result = staff_admission.authenticate_staff(db, "PETUGAS@example.com", "KODE1234", NOW)

    assert result.success
    assert result.data["staff"].email == "petugas@example.com"


def test_wrong_code_is_unauthorized(db):
    make_staff(db)

    assert staff_admission.authenticate_staff(db, "petugas@example.com", "SALAH", NOW).reason == FlowReason.unauthorized


def test_suspension_blocks_login_and_reports_remaining_time(db):
    staff = make_staff(db)
    admin = make_staff(db, email="admin@example.com", role=StaffRole.admin)
    staff_admission.suspend_staff(db, staff.id, reason="Absen", until=NOW + timedelta(days=2, hours=3), actor=admin)

    result = staff_admission.authenticate_staff(db, "petugas@example.com", "KODE1234", NOW)

    assert result.reason == FlowReason.suspended
    assert "2 hari 3 jam" in result.message


def test_suspension_outlives_its_end_date(db):
    staff = make_staff(db)
    staff_admission.suspend_staff(db, staff.id, until=NOW - timedelta(days=1))

    result = staff_admission.authenticate_staff(db, "petugas@example.com", "KODE1234", NOW)

    assert result.reason == FlowReason.suspended
    db.refresh(staff)
    assert staff.status == StaffStatus.suspended


def test_admin_cannot_suspend_self(db):
    admin = make_staff(db, email="admin@example.com", role=StaffRole.admin)

    assert staff_admission.suspend_staff(db, admin.id, actor=admin).reason == FlowReason.forbidden


def test_reactivation_restores_login(db):
    staff = make_staff(db)
    staff_admission.suspend_staff(db, staff.id, reason="Absen")

    assert staff_admission.reactivate_staff(db, staff.id).success
    assert staff_admission.authenticate_staff(db, "petugas@example.com", "KODE1234", NOW).success
