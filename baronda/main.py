import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from baronda.core.config import settings
from baronda.core.errors import http_exception_handler, unhandled_exception_handler
from baronda.models import Base  # noqa: F401 - register models
from baronda.routers import (
    admin,
    announcements,
    api,
    app_settings,
    auth,
    emergency_contacts,
    finance,
    health,
    notifications,
    reports,
    schedules,
    shortlinks,
    staff,
    users,
)

logging.basicConfig(level=settings.LOG_LEVEL.upper(), format=settings.LOG_FORMAT)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Baronda API",
    description=settings.APP_TAGLINE,
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

app.include_router(health.router, prefix="/health")
app.include_router(api.router, prefix="/api")
app.include_router(auth.router, prefix="/auth")
app.include_router(users.router, prefix="/users")
app.include_router(staff.router, prefix="/staff")
app.include_router(admin.router, prefix="/admin")
app.include_router(reports.router, prefix="/reports")
app.include_router(schedules.router, prefix="/schedules")
app.include_router(finance.router, prefix="/finance")
app.include_router(announcements.router, prefix="/announcements")
app.include_router(notifications.router, prefix="/notifications")
app.include_router(emergency_contacts.router, prefix="/emergency-contacts")
app.include_router(app_settings.router, prefix="/settings")
app.include_router(shortlinks.router, prefix="/shortlinks")
app.include_router(shortlinks.redirect_router, prefix="/go")


def seed_super_admin(db) -> None:
    """Create the configured super admin if none exists yet."""
    import uuid

    from baronda.core.security import get_password_hash
    from baronda.models.staff import Staff, StaffRole, StaffStatus

    if not settings.SUPER_ADMIN_EMAIL or not settings.SUPER_ADMIN_ACCESS_CODE:
        return
    if db.query(Staff).filter(Staff.role == StaffRole.super_admin).first() is not None:
        return
    db.add(
        Staff(
            id=str(uuid.uuid4()),
            name=settings.SUPER_ADMIN_NAME,
            email=settings.SUPER_ADMIN_EMAIL.strip().lower(),
            role=StaffRole.super_admin,
            status=StaffStatus.active,
            access_code_hash=get_password_hash(settings.SUPER_ADMIN_ACCESS_CODE),
            points=0,
        )
    )
    db.commit()
    logger.info("Seeded super admin %s", settings.SUPER_ADMIN_EMAIL)


@app.on_event("startup")
async def startup():
    from baronda.core.database import SessionLocal
    from baronda.services.otp import purge_expired_otps

    db = SessionLocal()
    try:
        seed_super_admin(db)
        purge_expired_otps(db)
    finally:
        db.close()
