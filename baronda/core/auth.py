from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from baronda.core.deps import get_db
from baronda.core.security import create_access_token, decode_access_token
from baronda.core.timeutil import utcnow
from baronda.models.staff import ADMIN_ROLES, Staff, StaffRole, StaffStatus
from baronda.models.user import User
from baronda.services.residents import block_status

security = HTTPBearer(auto_error=False)

KIND_STAFF = "staff"
KIND_USER = "user"


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _payload(credentials: Optional[HTTPAuthorizationCredentials], kind: str) -> dict:
    if not credentials or not credentials.credentials:
        raise _unauthorized("Silakan masuk terlebih dahulu.")
    payload = decode_access_token(credentials.credentials)
    if not payload or payload.get("kind") != kind or "sub" not in payload:
        raise _unauthorized("Sesi tidak valid atau sudah berakhir. Silakan masuk kembali.")
    return payload


def get_current_staff(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> Staff:
    payload = _payload(credentials, KIND_STAFF)
    staff = db.query(Staff).filter(Staff.id == payload["sub"]).first()
    if not staff:
        raise _unauthorized("Akun staf tidak ditemukan.")
    if staff.status != StaffStatus.active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Akun staf tidak aktif.",
        )
    return staff


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    payload = _payload(credentials, KIND_USER)
    user = db.query(User).filter(User.id == payload["sub"]).first()
    if not user:
        raise _unauthorized("Pengguna tidak ditemukan.")
    blocked = block_status(user, utcnow())
    if not blocked.success:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=blocked.message)
    return user


def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> Optional[User]:
    """The signed-in resident, or None for anonymous callers and other token kinds."""
    if not credentials or not credentials.credentials:
        return None
    payload = decode_access_token(credentials.credentials)
    if not payload or payload.get("kind") != KIND_USER or "sub" not in payload:
        return None
    return db.query(User).filter(User.id == payload["sub"]).first()


def require_staff_roles(*roles: StaffRole):
    """Dependency factory: active staff holding one of ``roles``. Admins always pass."""
    allowed = set(roles) | set(ADMIN_ROLES)

    def dependency(staff: Staff = Depends(get_current_staff)) -> Staff:
        if staff.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Anda tidak memiliki akses untuk tindakan ini.",
            )
        return staff

    return dependency


get_current_admin = require_staff_roles(StaffRole.admin)


def get_super_admin(staff: Staff = Depends(get_current_staff)) -> Staff:
    if staff.role != StaffRole.super_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Hanya Super Admin yang dapat melakukan tindakan ini.",
        )
    return staff


def staff_token(staff: Staff) -> str:
    role = staff.role.value if isinstance(staff.role, StaffRole) else str(staff.role)
    return create_access_token(subject=staff.id, extra_claims={"kind": KIND_STAFF, "role": role})


def user_token(user: User) -> str:
    return create_access_token(subject=user.id, extra_claims={"kind": KIND_USER, "role": "warga"})


def get_current_recipient(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> tuple[str, bool]:
    """(principal id, is_staff) for endpoints shared by residents and staff."""
    payload = decode_access_token(credentials.credentials) if credentials and credentials.credentials else None
    if payload and payload.get("kind") == KIND_STAFF:
        return get_current_staff(credentials, db).id, True
    return get_current_user(credentials, db).id, False
