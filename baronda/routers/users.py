from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from baronda.core.auth import get_current_user
from baronda.core.deps import get_db
from baronda.core.errors import raise_for_result
from baronda.core.security import verify_password
from baronda.models.otp import OtpContext
from baronda.models.user import User
from baronda.schemas.auth import MessageResponse
from baronda.schemas.users import EmailChangeRequest, EmailChangeVerify, UserProfileUpdate, UserResponse
from baronda.services import residents
from baronda.services.otp import OtpService
from baronda.services.staff_admission import normalize_address, title_case

router = APIRouter()


@router.get("/me", response_model=UserResponse)
def me(user: User = Depends(get_current_user)):
    return user


@router.patch("/me", response_model=UserResponse)
def update_me(body: UserProfileUpdate, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    data = body.model_dump(exclude_unset=True)
    if "display_name" in data and data["display_name"]:
        data["display_name"] = title_case(data["display_name"])
    if "address_type" in data:
        data["address_detail"] = normalize_address(data["address_type"], data.get("address_detail", user.address_detail))
    for k, v in data.items():
        setattr(user, k, v)
    db.commit()
    db.refresh(user)
    return user


@router.post("/me/email/request", response_model=MessageResponse)
def email_change_request(
    body: EmailChangeRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Re-check the password, then send an OTP to the new address."""
    if not verify_password(body.password, user.hashed_password):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Kata sandi salah.")
    new_email = body.new_email.lower()
    if db.query(User).filter(User.email == new_email).first():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email ini sudah terdaftar. Silakan gunakan email lain.",
        )
    result = raise_for_result(OtpService(db).issue(new_email, OtpContext.email_change, requested_by=user.id))
    return MessageResponse(message=result.message)


@router.post("/me/email/verify", response_model=MessageResponse)
def email_change_verify(
    body: EmailChangeVerify,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    raise_for_result(OtpService(db).verify(body.new_email, body.code, OtpContext.email_change, requested_by=user.id))
    result = raise_for_result(residents.change_email(db, user, body.new_email))
    return MessageResponse(message=result.message)
