from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from baronda.core.auth import get_current_admin
from baronda.core.deps import get_db
from baronda.core.errors import raise_for_result
from baronda.models.staff import Staff
from baronda.schemas.auth import MessageResponse, SendEmailRequest, SendOtpRequest
from baronda.services import email as mail
from baronda.services.otp import OtpService

router = APIRouter()


@router.post("/send-otp", response_model=MessageResponse)
def send_otp(body: SendOtpRequest, db: Session = Depends(get_db)):
    """Issue an OTP for the given context. The code only ever leaves by email."""
    result = raise_for_result(OtpService(db).issue(body.email, body.context))
    return MessageResponse(message=result.message)


@router.post("/send-email", response_model=MessageResponse)
def send_email(body: SendEmailRequest, admin: Staff = Depends(get_current_admin)):
    if not mail.send_email(body.to, body.subject, body.html, from_name=body.from_):
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Gagal mengirim email. Silakan coba lagi nanti.",
        )
    return MessageResponse(message="Email berhasil dikirim.")
