from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from baronda.models.otp import PUBLIC_OTP_CONTEXTS, OtpContext


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    kind: str
    role: Optional[str] = None


class SendOtpRequest(BaseModel):
    email: EmailStr
    context: OtpContext = OtpContext.user_registration

    @field_validator("context")
    @classmethod
    def context_must_be_public(cls, v: OtpContext) -> OtpContext:
        if v not in PUBLIC_OTP_CONTEXTS:
            raise ValueError("context is only issued from a signed-in account")
        return v


class VerifyOtpRequest(BaseModel):
    email: EmailStr
    code: str = Field(min_length=1, max_length=12)


class SendEmailRequest(BaseModel):
    from_: Optional[str] = Field(default=None, alias="from")
    to: EmailStr
    subject: str = Field(min_length=1)
    html: str = Field(min_length=1)


class AddressFields(BaseModel):
    phone: Optional[str] = None
    address_type: Optional[str] = Field(default=None, pattern="^(kilongan|luar_kilongan)$")
    address_detail: Optional[str] = None


class UserRegisterVerify(VerifyOtpRequest, AddressFields):
    name: str = Field(min_length=1, max_length=100)
    password: str = Field(min_length=8)


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class PasswordResetTokenResponse(BaseModel):
    success: bool = True
    message: str
    reset_token: str


class PasswordResetConfirm(BaseModel):
    reset_token: str
    new_password: str = Field(min_length=8)


class StaffRegister(AddressFields):
    name: str = Field(min_length=1, max_length=100)
    email: EmailStr


class StaffRegisterVerify(VerifyOtpRequest, AddressFields):
    name: str = Field(min_length=1, max_length=100)


class StaffLogin(BaseModel):
    email: EmailStr
    access_code: str


class AccessCodeRecover(VerifyOtpRequest):
    pass
