"""Flow results and how they surface over HTTP.

Services return a ``FlowResult`` for every expected outcome instead of raising.
Routers hand failed results to ``raise_for_result`` which maps the reason onto
an HTTP status; the handlers below render every error as
``{"success": false, "message": ...}``.
"""

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class FlowReason(str, enum.Enum):
    ok = "ok"
    invalid_code = "invalid_code"
    already_used = "already_used"
    expired = "expired"
    too_many_attempts = "too_many_attempts"
    wrong_code = "wrong_code"
    cooldown = "cooldown"
    not_found = "not_found"
    unauthorized = "unauthorized"
    forbidden = "forbidden"
    conflict = "conflict"
    invalid = "invalid"
    pending = "pending"
    suspended = "suspended"
    blocked = "blocked"
    delivery_failed = "delivery_failed"


_STATUS_BY_REASON = {
    FlowReason.invalid_code: status.HTTP_400_BAD_REQUEST,
    FlowReason.already_used: status.HTTP_400_BAD_REQUEST,
    FlowReason.expired: status.HTTP_400_BAD_REQUEST,
    FlowReason.too_many_attempts: status.HTTP_429_TOO_MANY_REQUESTS,
    FlowReason.wrong_code: status.HTTP_400_BAD_REQUEST,
    FlowReason.cooldown: status.HTTP_400_BAD_REQUEST,
    FlowReason.not_found: status.HTTP_404_NOT_FOUND,
    FlowReason.unauthorized: status.HTTP_401_UNAUTHORIZED,
    FlowReason.forbidden: status.HTTP_403_FORBIDDEN,
    FlowReason.conflict: status.HTTP_409_CONFLICT,
    FlowReason.invalid: status.HTTP_400_BAD_REQUEST,
    FlowReason.pending: status.HTTP_403_FORBIDDEN,
    FlowReason.suspended: status.HTTP_403_FORBIDDEN,
    FlowReason.blocked: status.HTTP_403_FORBIDDEN,
    FlowReason.delivery_failed: status.HTTP_502_BAD_GATEWAY,
}

GENERIC_ERROR_MESSAGE = "Terjadi kesalahan pada server. Silakan coba lagi nanti."


@dataclass
class FlowResult:
    success: bool
    message: str
    reason: FlowReason = FlowReason.ok
    data: dict = field(default_factory=dict)

    @classmethod
    def ok(cls, message: str, **data: Any) -> "FlowResult":
        return cls(success=True, message=message, data=data)

    @classmethod
    def fail(cls, reason: FlowReason, message: str, **data: Any) -> "FlowResult":
        return cls(success=False, message=message, reason=reason, data=data)

    def __bool__(self) -> bool:
        return self.success


def status_for(reason: FlowReason) -> int:
    return _STATUS_BY_REASON.get(reason, status.HTTP_400_BAD_REQUEST)


def raise_for_result(result: FlowResult) -> FlowResult:
    if not result.success:
        raise HTTPException(status_code=status_for(result.reason), detail=result.message)
    return result


def not_found(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


def error_body(message: Optional[str]) -> dict:
    return {"success": False, "message": message or GENERIC_ERROR_MESSAGE}


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content=error_body(GENERIC_ERROR_MESSAGE))
