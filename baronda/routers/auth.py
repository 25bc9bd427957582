from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from baronda.core.auth import staff_token, user_token
from baronda.core.deps import get_db
from baronda.core.errors import raise_for_result
from baronda.models.otp import OtpContext
from baronda.models.staff import Staff
from baronda.models.user import User
from baronda.schemas.auth import (
    AccessCodeRecover,
    MessageResponse,
    PasswordResetConfirm,
    PasswordResetTokenResponse,
    SendOtpRequest,
    StaffLogin,
    StaffRegister,
    StaffRegisterVerify,
    TokenResponse,
    UserLogin,
    UserRegisterVerify,
    VerifyOtpRequest,
)
from baronda.services import access_code, residents, staff_admission
from baronda.services.otp import OtpService

router = APIRouter()


def _send_otp(db: Session, email: str, context: OtpContext) -> MessageResponse:
    result = raise_for_result(OtpService(db).issue(email, context))
    return MessageResponse(message=result.message)


def _verify_otp(db: Session, email: str, code: str, context: OtpContext) -> None:
    raise_for_result(OtpService(db).verify(email, code, context))


# Residents


@router.post("/register", response_model=MessageResponse)
def register_request(body: SendOtpRequest, db: Session = Depends(get_db)):
    """Send the registration OTP to a new resident."""
    if db.query(User).filter(User.email == body.email.lower()).first():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email ini sudah terdaftar. Silakan gunakan email lain.",
        )
    return _send_otp(db, body.email, OtpContext.user_registration)


@router.post("/register/verify", response_model=MessageResponse)
def register_verify(body: UserRegisterVerify, db: Session = Depends(get_db)):
    _verify_otp(db, body.email, body.code, OtpContext.user_registration)
    result = raise_for_result(
        residents.register_user(
            db,
            name=body.name,
            email=body.email,
            password=body.password,
            phone=body.phone,
            address_type=body.address_type,
            address_detail=body.address_detail,
        )
    )
    return MessageResponse(message=result.message)


@router.post("/login", response_model=TokenResponse)
def login(body: UserLogin, db: Session = Depends(get_db)):
    result = raise_for_result(residents.authenticate_user(db, body.email, body.password))
    return TokenResponse(access_token=user_token(result.data["user"]), kind="user", role="warga")


@router.post("/password-reset/request", response_model=MessageResponse)
def password_reset_request(body: SendOtpRequest, db: Session = Depends(get_db)):
    if not db.query(User).filter(User.email == body.email.lower()).first():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Email tidak terdaftar.")
    return _send_otp(db, body.email, OtpContext.user_password_reset)


@router.post("/password-reset/verify", response_model=PasswordResetTokenResponse)
def password_reset_verify(body: VerifyOtpRequest, db: Session = Depends(get_db)):
    """Trade a verified OTP for a short-lived reset token."""
    _verify_otp(db, body.email, body.code, OtpContext.user_password_reset)
    user = db.query(User).filter(User.email == body.email.lower()).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Email tidak terdaftar.")
    return PasswordResetTokenResponse(
        message="Kode OTP berhasil diverifikasi. Silakan buat kata sandi baru.",
        reset_token=residents.create_password_reset_token(user),
    )


@router.post("/password-reset", response_model=MessageResponse)
def password_reset(body: PasswordResetConfirm, db: Session = Depends(get_db)):
    result = raise_for_result(residents.reset_password(db, body.reset_token, body.new_password))
    return MessageResponse(message=result.message)


# Staff


@router.post("/staff/register", response_model=MessageResponse)
def staff_register(body: StaffRegister, db: Session = Depends(get_db)):
    """Send the staff registration OTP. Details are resubmitted with the code."""
    if db.query(Staff).filter(Staff.email == body.email.lower()).first():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email ini sudah terdaftar sebagai petugas.",
        )
    return _send_otp(db, body.email, OtpContext.staff_registration)


@router.post("/staff/register/verify", response_model=MessageResponse)
def staff_register_verify(body: StaffRegisterVerify, db: Session = Depends(get_db)):
    _verify_otp(db, body.email, body.code, OtpContext.staff_registration)
    result = raise_for_result(
        staff_admission.create_pending_staff(
            db,
            name=body.name,
            email=body.email,
            phone=body.phone,
            address_type=body.address_type,
            address_detail=body.address_detail,
        )
    )
    return MessageResponse(message=result.message)


@router.post("/staff/login", response_model=TokenResponse)
def staff_login(body: StaffLogin, db: Session = Depends(get_db)):
    result = raise_for_result(staff_admission.authenticate_staff(db, body.email, body.access_code))
    staff = result.data["staff"]
    return TokenResponse(access_token=staff_token(staff), kind="staff", role=staff.role.value)


@router.post("/staff/access-code/request", response_model=MessageResponse)
def staff_access_code_request(body: SendOtpRequest, db: Session = Depends(get_db)):
    return _send_otp(db, body.email, OtpContext.staff_reset_access_code)


@router.post("/staff/access-code/recover", response_model=MessageResponse)
def staff_access_code_recover(body: AccessCodeRecover, db: Session = Depends(get_db)):
    """Verify the recovery OTP and email a newly generated access code."""
    _verify_otp(db, body.email, body.code, OtpContext.staff_reset_access_code)
    result = raise_for_result(access_code.recover_access_code(db, body.email))
    return MessageResponse(message=result.message)
