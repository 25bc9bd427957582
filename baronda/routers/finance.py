import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from baronda.core.auth import get_current_admin, get_current_staff, get_current_user, require_staff_roles
from baronda.core.deps import get_db
from baronda.core.errors import not_found
from baronda.models.due import Due
from baronda.models.honorarium import Honorarium
from baronda.models.staff import Staff, StaffRole
from baronda.models.user import User
from baronda.schemas.finance import (
    DueCreate,
    DueResponse,
    HonorariumCreate,
    HonorariumResponse,
    HonorariumUpdate,
)
from baronda.services.audit import record_admin_action
from baronda.services.notifications import notify

router = APIRouter()

dues_recorder = require_staff_roles(StaffRole.petugas, StaffRole.bendahara)
treasurer = require_staff_roles(StaffRole.bendahara)


# Dues (iuran)


@router.post("/dues", response_model=DueResponse, status_code=201)
def record_due(body: DueCreate, db: Session = Depends(get_db), staff: Staff = Depends(dues_recorder)):
    user = db.query(User).filter(User.id == body.user_id).first()
    if not user:
        raise not_found("Warga tidak ditemukan.")
    due = Due(
        id=str(uuid.uuid4()),
        user_id=user.id,
        payer_name=user.display_name,
        amount=body.amount,
        month=body.month,
        year=body.year,
        recorded_by_id=staff.id,
        recorded_by_name=staff.name,
        notes=body.notes,
    )
    db.add(due)
    notify(
        db,
        user.id,
        "Pembayaran Iuran Diterima",
        f"Pembayaran iuran {body.month} {body.year} sebesar Rp {body.amount:,} telah dicatat. Terima kasih!",
        link="/profile",
    )
    db.commit()
    db.refresh(due)
    return due


@router.get("/dues", response_model=list[DueResponse])
def list_dues(db: Session = Depends(get_db), staff: Staff = Depends(dues_recorder)):
    return db.query(Due).order_by(Due.payment_date.desc()).all()


@router.get("/dues/user/{user_id}", response_model=list[DueResponse])
def list_user_dues(user_id: str, db: Session = Depends(get_db), staff: Staff = Depends(dues_recorder)):
    return db.query(Due).filter(Due.user_id == user_id).order_by(Due.payment_date.desc()).all()


@router.get("/dues/mine", response_model=list[DueResponse])
def my_dues(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return db.query(Due).filter(Due.user_id == user.id).order_by(Due.payment_date.desc()).all()


@router.delete("/dues/{due_id}", status_code=204)
def delete_due(due_id: str, db: Session = Depends(get_db), admin: Staff = Depends(get_current_admin)):
    due = db.query(Due).filter(Due.id == due_id).first()
    if not due:
        raise not_found("Data iuran tidak ditemukan.")
    record_admin_action(db, admin, "due.delete", "due", due.id, {"user_id": due.user_id, "amount": due.amount})
    db.delete(due)
    db.commit()


# Honorariums


@router.post("/honorariums", response_model=HonorariumResponse, status_code=201)
def create_honorarium(body: HonorariumCreate, db: Session = Depends(get_db), staff: Staff = Depends(treasurer)):
    recipient = db.query(Staff).filter(Staff.id == body.staff_id).first()
    if not recipient:
        raise not_found("Data staf tidak ditemukan.")
    honor = Honorarium(
        id=str(uuid.uuid4()),
        staff_id=recipient.id,
        staff_name=recipient.name,
        period=body.period,
        amount=body.amount,
        status=body.status.value,
        notes=body.notes,
    )
    db.add(honor)
    notify(
        db,
        recipient.id,
        "Honorarium Diterbitkan",
        f"Honorarium periode {body.period} sebesar Rp {body.amount:,} ({body.status.value}).",
        link="/petugas/honor",
    )
    record_admin_action(db, staff, "honorarium.create", "honorarium", honor.id)
    db.commit()
    db.refresh(honor)
    return honor


@router.get("/honorariums", response_model=list[HonorariumResponse])
def list_honorariums(db: Session = Depends(get_db), staff: Staff = Depends(treasurer)):
    return db.query(Honorarium).order_by(Honorarium.issue_date.desc()).all()


@router.get("/honorariums/mine", response_model=list[HonorariumResponse])
def my_honorariums(db: Session = Depends(get_db), staff: Staff = Depends(get_current_staff)):
    return (
        db.query(Honorarium)
        .filter(Honorarium.staff_id == staff.id)
        .order_by(Honorarium.issue_date.desc())
        .all()
    )


@router.patch("/honorariums/{honor_id}", response_model=HonorariumResponse)
def update_honorarium(
    honor_id: str,
    body: HonorariumUpdate,
    db: Session = Depends(get_db),
    staff: Staff = Depends(treasurer),
):
    honor = db.query(Honorarium).filter(Honorarium.id == honor_id).first()
    if not honor:
        raise not_found("Data honorarium tidak ditemukan.")
    data = body.model_dump(exclude_unset=True)
    if data.get("status") is not None:
        data["status"] = data["status"].value
    for k, v in data.items():
        setattr(honor, k, v)
    record_admin_action(db, staff, "honorarium.update", "honorarium", honor.id, data)
    db.commit()
    db.refresh(honor)
    return honor


@router.delete("/honorariums/{honor_id}", status_code=204)
def delete_honorarium(honor_id: str, db: Session = Depends(get_db), staff: Staff = Depends(treasurer)):
    honor = db.query(Honorarium).filter(Honorarium.id == honor_id).first()
    if not honor:
        raise not_found("Data honorarium tidak ditemukan.")
    record_admin_action(db, staff, "honorarium.delete", "honorarium", honor.id)
    db.delete(honor)
    db.commit()
