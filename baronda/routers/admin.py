from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from baronda.core.auth import get_current_admin, get_super_admin
from baronda.core.deps import get_db
from baronda.core.errors import not_found, raise_for_result
from baronda.models.admin_log import AdminLog
from baronda.models.otp import OtpContext
from baronda.models.staff import Staff
from baronda.models.user import User
from baronda.schemas.auth import MessageResponse
from baronda.schemas.staff import AdminInvite, AdminLogResponse, AdminVerifyToken
from baronda.schemas.users import UserBlock, UserResponse
from baronda.services import admin_verification
from baronda.services.audit import record_admin_action
from baronda.services.otp import OtpService

router = APIRouter()


@router.post("/admins/invite/request", response_model=MessageResponse)
def invite_admin_request(db: Session = Depends(get_db), super_admin: Staff = Depends(get_super_admin)):
    """Send the confirmation OTP for creating an admin to the super admin's own email."""
    result = raise_for_result(
        OtpService(db).issue(super_admin.email, OtpContext.admin_creation, requested_by=super_admin.id)
    )
    return MessageResponse(message=result.message)


@router.post("/admins/invite", response_model=MessageResponse)
def invite_admin(
    body: AdminInvite,
    db: Session = Depends(get_db),
    super_admin: Staff = Depends(get_super_admin),
):
    """Email a one-hour verification link that creates the admin account."""
    raise_for_result(
        OtpService(db).verify(super_admin.email, body.code, OtpContext.admin_creation, requested_by=super_admin.id)
    )
    result = raise_for_result(
        admin_verification.send_admin_verification(
            db,
            name=body.name,
            email=body.email,
            phone=body.phone,
            address_type=body.address_type,
            address_detail=body.address_detail,
            role=body.role,
            actor=super_admin,
        )
    )
    return MessageResponse(message=result.message)


@router.post("/admins/verify", response_model=MessageResponse)
def verify_admin(body: AdminVerifyToken, db: Session = Depends(get_db)):
    result = raise_for_result(admin_verification.verify_admin_token(db, body.token))
    return MessageResponse(message=result.message)


@router.get("/logs", response_model=list[AdminLogResponse])
def list_admin_logs(
    limit: int = 100,
    db: Session = Depends(get_db),
    admin: Staff = Depends(get_current_admin),
):
    limit = max(1, min(limit, 500))
    return db.query(AdminLog).order_by(AdminLog.created_at.desc()).limit(limit).all()


@router.get("/users", response_model=list[UserResponse])
def list_users(db: Session = Depends(get_db), admin: Staff = Depends(get_current_admin)):
    return db.query(User).order_by(User.created_at.desc()).all()


@router.post("/users/{user_id}/block", response_model=UserResponse)
def block_user(
    user_id: str,
    body: UserBlock,
    db: Session = Depends(get_db),
    admin: Staff = Depends(get_current_admin),
):
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise not_found("Pengguna tidak ditemukan.")
    user.is_blocked = True
    user.block_reason = body.reason
    user.block_starts = body.starts
    user.block_ends = body.ends
    record_admin_action(db, admin, "user.block", "user", user.id, body.model_dump())
    db.commit()
    db.refresh(user)
    return user


@router.post("/users/{user_id}/unblock", response_model=UserResponse)
def unblock_user(user_id: str, db: Session = Depends(get_db), admin: Staff = Depends(get_current_admin)):
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise not_found("Pengguna tidak ditemukan.")
    user.is_blocked = False
    user.block_reason = None
    user.block_starts = None
    user.block_ends = None
    record_admin_action(db, admin, "user.unblock", "user", user.id)
    db.commit()
    db.refresh(user)
    return user


@router.delete("/users/{user_id}", status_code=204)
def delete_user(user_id: str, db: Session = Depends(get_db), admin: Staff = Depends(get_current_admin)):
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise not_found("Pengguna tidak ditemukan.")
    record_admin_action(db, admin, "user.delete", "user", user.id, {"email": user.email})
    db.delete(user)
    db.commit()
