import re
import uuid
from datetime import date, datetime, timedelta, timezone

from baronda.core.errors import FlowReason
from baronda.models.schedule import Schedule, ScheduleStatus
from baronda.services.schedules import check_in, generate_schedule_token, update_officer_status

from conftest import make_staff

NOW = datetime(2026, 6, 15, 20, 0, tzinfo=timezone.utc)


def _schedule(db, officer, status=ScheduleStatus.pending):
    schedule = Schedule(
        id=str(uuid.uuid4()),
        date=date(2026, 6, 15),
        time="22:00 - 04:00",
        officer_id=officer.id,
        officer_name=officer.name,
        area="Pos Ronda 1",
        status=status.value,
    )
    db.add(schedule)
    db.commit()
    return schedule


def test_token_is_32_hex_chars_valid_for_a_day(db):
    officer = make_staff(db)
    schedule = _schedule(db, officer)

    result = generate_schedule_token(db, schedule.id, NOW)

    assert re.fullmatch(r"[0-9a-f]{32}", result.data["token"])
    assert result.data["expires_at"] == NOW + timedelta(hours=24)


def test_check_in_moves_to_in_progress(db):
    officer = make_staff(db)
    schedule = _schedule(db, officer)
    token = generate_schedule_token(db, schedule.id, NOW).data["token"]

    result = check_in(db, schedule.id, token, officer, NOW + timedelta(hours=2))

    assert result.success
    db.refresh(schedule)
    assert schedule.status == ScheduleStatus.in_progress.value
    assert schedule.qr_token is None


def test_check_in_rejects_wrong_or_expired_token(db):
    officer = make_staff(db)
    schedule = _schedule(db, officer)
    token = generate_schedule_token(db, schedule.id, NOW).data["token"]

    assert check_in(db, schedule.id, "0" * 32, officer, NOW).reason == FlowReason.invalid_code
    assert check_in(db, schedule.id, token, officer, NOW + timedelta(hours=25)).reason == FlowReason.expired


def test_check_in_only_for_assigned_officer(db):
    officer = make_staff(db)
    other = make_staff(db, email="lain@example.com")
    schedule = _schedule(db, officer)
    token = generate_schedule_token(db, schedule.id, NOW).data["token"]

    assert check_in(db, schedule.id, token, other, NOW).reason == FlowReason.forbidden


def test_check_in_requires_pending(db):
    officer = make_staff(db)
    schedule = _schedule(db, officer, ScheduleStatus.completed)
    token = generate_schedule_token(db, schedule.id, NOW).data["token"]

    assert check_in(db, schedule.id, token, officer, NOW).reason == FlowReason.conflict


def test_absence_needs_reason(db):
    officer = make_staff(db)
    schedule = _schedule(db, officer)

    assert update_officer_status(db, schedule.id, officer, ScheduleStatus.sakit).reason == FlowReason.invalid
    assert update_officer_status(db, schedule.id, officer, ScheduleStatus.sakit, "Demam").success
    db.refresh(schedule)
    assert schedule.status == "Sakit"
    assert schedule.reason == "Demam"


def test_complete_only_after_check_in(db):
    officer = make_staff(db)
    schedule = _schedule(db, officer)

    assert update_officer_status(db, schedule.id, officer, ScheduleStatus.completed).reason == FlowReason.conflict

    schedule.status = ScheduleStatus.in_progress.value
    db.commit()
    assert update_officer_status(db, schedule.id, officer, ScheduleStatus.completed).success
