from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings


def _parse_cors_origins(s: str) -> List[str]:
    """Parse CORS_ORIGINS from comma-separated or JSON array string."""
    s = (s or "").strip()
    if not s:
        return []
    if s.startswith("["):
        import json
        try:
            out = json.loads(s)
            return [str(x).strip() for x in out if x]
        except ValueError:
            pass
    return [x.strip() for x in s.split(",") if x.strip()]


class Settings(BaseSettings):
    """Application settings from env."""

    APP_NAME: str = "Baronda"
    APP_TAGLINE: str = "Siskamling Digital Kelurahan Kilongan"
    APP_LOGO_URL: str = "https://iili.io/KJ4aGxp.png"

    # Database
    DATABASE_URL: str = "sqlite:///./baronda.db"

    # Security
    SECRET_KEY: str = "change-me-in-production"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 12
    PASSWORD_RESET_TOKEN_EXPIRE_MINUTES: int = 15

    # CORS – must include the origin where the frontend runs
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def cors_origins_list(cls, v: object) -> List[str]:
        if isinstance(v, list):
            return [str(x).strip() for x in v if x]
        return _parse_cors_origins(str(v) if v else "")

    # Base URL for links in emails (admin verification, report pages)
    FRONTEND_BASE_URL: str = "http://localhost:3000"

    # One-time passwords: one outstanding code per email and context
    OTP_EXPIRE_MINUTES: int = 10
    OTP_MAX_ATTEMPTS: int = 5
    OTP_PEPPER: str = "change-me"

    # Staff access codes
    ACCESS_CODE_COOLDOWN_DAYS: int = 7
    ACCESS_CODE_LENGTH: int = 8

    # Link/token validity
    ADMIN_VERIFICATION_EXPIRE_MINUTES: int = 60
    SCHEDULE_TOKEN_EXPIRE_HOURS: int = 24

    # Email (SMTP relay); credentials only ever come from env
    SMTP_HOST: str = ""
    SMTP_PORT: int = 587
    SMTP_USE_SSL: bool = False
    SMTP_USER: str = ""
    SMTP_PASSWORD: str = ""
    SMTP_FROM_EMAIL: str = "noreply@baronda.local"
    SMTP_FROM_NAME: str = "Baronda"

    # Report triage model (Gemini). Empty key disables triage.
    GEMINI_API_KEY: str = ""
    GEMINI_MODEL: str = "gemini-2.5-flash"

    # Initial super admin, seeded on startup when no super admin exists
    SUPER_ADMIN_EMAIL: str = ""
    SUPER_ADMIN_NAME: str = "Super Admin"
    SUPER_ADMIN_ACCESS_CODE: str = ""

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
