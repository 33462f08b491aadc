"""Uniform success/error envelopes returned by every tool."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from ..models.types import ErrorEnvelope, SuccessEnvelope

SCHEMA = "1.0.0"


class ErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    BAD_REQUEST = "BAD_REQUEST"
    CONFLICT = "CONFLICT"
    RATE_LIMIT = "RATE_LIMIT"


def iso_timestamp(dt: Optional[datetime] = None) -> str:
    """Millisecond-precision UTC ISO-8601 string with a trailing Z."""
    dt = (dt or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def success_response(data: Any, message: Optional[str] = None) -> SuccessEnvelope:
    return {
        "success": True,
        "data": data,
        "message": message,
        "timestamp": iso_timestamp(),
    }


def error_response(code: ErrorCode, message: str, details: Any = None) -> ErrorEnvelope:
    return {
        "success": False,
        "error": {"code": ErrorCode(code).value, "message": message, "details": details},
        "timestamp": iso_timestamp(),
    }
