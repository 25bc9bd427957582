from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from baronda.core.auth import get_current_admin, get_current_staff, get_super_admin
from baronda.core.deps import get_db
from baronda.core.errors import not_found, raise_for_result
from baronda.core.security import verify_password
from baronda.models.otp import OtpContext
from baronda.models.staff import Staff, StaffRole, StaffStatus
from baronda.schemas.auth import MessageResponse
from baronda.schemas.staff import (
    AccessCodeChange,
    AccessCodeReset,
    StaffEmailChangeRequest,
    StaffReject,
    StaffResponse,
    StaffRoleUpdate,
    StaffSuspend,
)
from baronda.schemas.users import EmailChangeVerify
from baronda.services import access_code, staff_admission
from baronda.services.audit import record_admin_action
from baronda.services.otp import OtpService

router = APIRouter()


@router.get("/me", response_model=StaffResponse)
def staff_me(staff: Staff = Depends(get_current_staff)):
    return staff


@router.put("/me/access-code", response_model=MessageResponse)
def change_own_access_code(
    body: AccessCodeChange,
    db: Session = Depends(get_db),
    staff: Staff = Depends(get_current_staff),
):
    result = raise_for_result(
        access_code.change_access_code(
            db,
            staff.id,
            body.current_code,
            body.new_code,
            authorize=access_code.allow_self_or_admin(staff),
        )
    )
    return MessageResponse(message=result.message)


@router.post("/{staff_id}/access-code/reset", response_model=MessageResponse)
def reset_access_code(
    staff_id: str,
    body: AccessCodeReset,
    db: Session = Depends(get_db),
    staff: Staff = Depends(get_current_staff),
):
    """Generate a new code for ``staff_id`` and email it to them."""
    result = raise_for_result(
        access_code.change_access_code(
            db,
            staff_id,
            body.current_code,
            authorize=access_code.allow_self_or_admin(staff),
        )
    )
    return MessageResponse(message=result.message)


@router.post("/me/email/request", response_model=MessageResponse)
def staff_email_change_request(
    body: StaffEmailChangeRequest,
    db: Session = Depends(get_db),
    staff: Staff = Depends(get_current_staff),
):
    """Re-check the access code, then send an OTP to the new address."""
    if not verify_password(body.current_code, staff.access_code_hash):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Kode akses yang Anda masukkan salah.")
    new_email = body.new_email.strip().lower()
    if db.query(Staff).filter(Staff.email == new_email).first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email ini sudah digunakan.")
    result = raise_for_result(OtpService(db).issue(new_email, OtpContext.email_change, requested_by=staff.id))
    return MessageResponse(message=result.message)


@router.post("/me/email/verify", response_model=MessageResponse)
def staff_email_change_verify(
    body: EmailChangeVerify,
    db: Session = Depends(get_db),
    staff: Staff = Depends(get_current_staff),
):
    raise_for_result(OtpService(db).verify(body.new_email, body.code, OtpContext.email_change, requested_by=staff.id))
    new_email = body.new_email.lower()
    if db.query(Staff).filter(Staff.email == new_email, Staff.id != staff.id).first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email ini sudah digunakan.")
    staff.email = new_email
    db.commit()
    return MessageResponse(message="Email berhasil diubah.")


# Admin: staff management


@router.get("", response_model=list[StaffResponse])
def list_staff(
    status_filter: Optional[StaffStatus] = None,
    db: Session = Depends(get_db),
    admin: Staff = Depends(get_current_admin),
):
    q = db.query(Staff)
    if status_filter is not None:
        q = q.filter(Staff.status == status_filter)
    return q.order_by(Staff.created_at.desc()).all()


@router.get("/{staff_id}", response_model=StaffResponse)
def get_staff(staff_id: str, db: Session = Depends(get_db), admin: Staff = Depends(get_current_admin)):
    staff = db.query(Staff).filter(Staff.id == staff_id).first()
    if not staff:
        raise not_found("Data staf tidak ditemukan.")
    return staff


@router.post("/{staff_id}/approve", response_model=MessageResponse)
def approve(staff_id: str, db: Session = Depends(get_db), admin: Staff = Depends(get_current_admin)):
    result = raise_for_result(staff_admission.approve_staff(db, staff_id, admin))
    return MessageResponse(message=result.message)


@router.post("/{staff_id}/reject", response_model=MessageResponse)
def reject(
    staff_id: str,
    body: StaffReject,
    db: Session = Depends(get_db),
    admin: Staff = Depends(get_current_admin),
):
    result = raise_for_result(staff_admission.reject_staff(db, staff_id, body.reason, admin))
    return MessageResponse(message=result.message)


@router.post("/{staff_id}/suspend", response_model=MessageResponse)
def suspend(
    staff_id: str,
    body: StaffSuspend,
    db: Session = Depends(get_db),
    admin: Staff = Depends(get_current_admin),
):
    result = raise_for_result(
        staff_admission.suspend_staff(db, staff_id, reason=body.reason, until=body.until, actor=admin)
    )
    return MessageResponse(message=result.message)


@router.post("/{staff_id}/reactivate", response_model=MessageResponse)
def reactivate(staff_id: str, db: Session = Depends(get_db), admin: Staff = Depends(get_current_admin)):
    result = raise_for_result(staff_admission.reactivate_staff(db, staff_id, admin))
    return MessageResponse(message=result.message)


@router.patch("/{staff_id}/role", response_model=StaffResponse)
def update_role(
    staff_id: str,
    body: StaffRoleUpdate,
    db: Session = Depends(get_db),
    admin: Staff = Depends(get_super_admin),
):
    staff = db.query(Staff).filter(Staff.id == staff_id).first()
    if not staff:
        raise not_found("Data staf tidak ditemukan.")
    if staff.id == admin.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Anda tidak dapat mengubah peran Anda sendiri.")
    if body.role == StaffRole.super_admin:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Peran Super Admin tidak dapat diberikan.")
    old_role = staff.role
    staff.role = body.role
    record_admin_action(db, admin, "staff.role", "staff", staff.id, {"from": old_role, "to": body.role})
    db.commit()
    db.refresh(staff)
    return staff
