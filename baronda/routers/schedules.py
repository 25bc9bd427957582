import uuid

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from baronda.core.auth import get_current_admin, get_current_staff
from baronda.core.deps import get_db
from baronda.core.errors import not_found, raise_for_result
from baronda.models.schedule import Schedule, ScheduleStatus
from baronda.models.staff import Staff, StaffStatus
from baronda.schemas.auth import MessageResponse
from baronda.schemas.schedules import (
    ScheduleCheckIn,
    ScheduleCreate,
    ScheduleOfficerStatus,
    ScheduleResponse,
    ScheduleTokenResponse,
    ScheduleUpdate,
)
from baronda.services import schedules as schedule_service
from baronda.services.audit import record_admin_action
from baronda.services.notifications import notify

router = APIRouter()


def _active_officer(db: Session, officer_id: str) -> Staff:
    officer = db.query(Staff).filter(Staff.id == officer_id, Staff.status == StaffStatus.active).first()
    if not officer:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Petugas tidak ditemukan atau tidak aktif.")
    return officer


@router.get("", response_model=list[ScheduleResponse])
def list_schedules(db: Session = Depends(get_db), admin: Staff = Depends(get_current_admin)):
    return db.query(Schedule).order_by(Schedule.date.desc()).all()


@router.get("/mine", response_model=list[ScheduleResponse])
def my_schedules(db: Session = Depends(get_db), staff: Staff = Depends(get_current_staff)):
    return db.query(Schedule).filter(Schedule.officer_id == staff.id).order_by(Schedule.date.asc()).all()


@router.post("", response_model=ScheduleResponse, status_code=201)
def create_schedule(body: ScheduleCreate, db: Session = Depends(get_db), admin: Staff = Depends(get_current_admin)):
    officer = _active_officer(db, body.officer_id)
    schedule = Schedule(
        id=str(uuid.uuid4()),
        date=body.date,
        time=body.time,
        officer_id=officer.id,
        officer_name=officer.name,
        area=body.area,
        status=ScheduleStatus.pending.value,
    )
    db.add(schedule)
    notify(
        db,
        officer.id,
        "Jadwal Patroli Baru",
        f"Anda dijadwalkan bertugas di {body.area} pada {body.date.isoformat()} pukul {body.time}.",
        link="/petugas/schedule",
    )
    record_admin_action(db, admin, "schedule.create", "schedule", schedule.id)
    db.commit()
    db.refresh(schedule)
    return schedule


@router.patch("/{schedule_id}", response_model=ScheduleResponse)
def update_schedule(
    schedule_id: str,
    body: ScheduleUpdate,
    db: Session = Depends(get_db),
    admin: Staff = Depends(get_current_admin),
):
    schedule = db.query(Schedule).filter(Schedule.id == schedule_id).first()
    if not schedule:
        raise not_found("Jadwal tidak ditemukan.")
    data = body.model_dump(exclude_unset=True)
    if data.get("officer_id"):
        officer = _active_officer(db, data["officer_id"])
        data["officer_name"] = officer.name
    if "status" in data and data["status"] is not None:
        data["status"] = data["status"].value
    for k, v in data.items():
        setattr(schedule, k, v)
    record_admin_action(db, admin, "schedule.update", "schedule", schedule.id, data)
    db.commit()
    db.refresh(schedule)
    return schedule


@router.delete("/{schedule_id}", status_code=204)
def delete_schedule(schedule_id: str, db: Session = Depends(get_db), admin: Staff = Depends(get_current_admin)):
    schedule = db.query(Schedule).filter(Schedule.id == schedule_id).first()
    if not schedule:
        raise not_found("Jadwal tidak ditemukan.")
    record_admin_action(db, admin, "schedule.delete", "schedule", schedule.id)
    db.delete(schedule)
    db.commit()


@router.post("/{schedule_id}/token", response_model=ScheduleTokenResponse)
def generate_token(schedule_id: str, db: Session = Depends(get_db), admin: Staff = Depends(get_current_admin)):
    """Token encoded in the check-in QR code shown at the post."""
    result = raise_for_result(schedule_service.generate_schedule_token(db, schedule_id))
    return ScheduleTokenResponse(token=result.data["token"], expires_at=result.data["expires_at"])


@router.post("/{schedule_id}/check-in", response_model=MessageResponse)
def check_in(
    schedule_id: str,
    body: ScheduleCheckIn,
    db: Session = Depends(get_db),
    staff: Staff = Depends(get_current_staff),
):
    result = raise_for_result(schedule_service.check_in(db, schedule_id, body.token, staff))
    return MessageResponse(message=result.message)


@router.post("/{schedule_id}/status", response_model=MessageResponse)
def officer_status(
    schedule_id: str,
    body: ScheduleOfficerStatus,
    db: Session = Depends(get_db),
    staff: Staff = Depends(get_current_staff),
):
    result = raise_for_result(
        schedule_service.update_officer_status(db, schedule_id, staff, body.status, body.reason)
    )
    return MessageResponse(message=result.message)
