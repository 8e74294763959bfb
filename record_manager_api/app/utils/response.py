"""
Uniform response envelope.

Every payload leaving the API, successful or not, has the same shape::

    {"success": bool, "data": ..., "message": str, "timestamp": str}

``timestamp`` is the UTC wall clock at construction time in ISO-8601
with millisecond precision, e.g. ``2024-01-01T00:00:00.000Z``.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _timestamp() -> str:
    return _utcnow().isoformat(timespec="milliseconds").replace("+00:00", "Z")


def create_response(success: bool, data: Optional[Any] = None, message: str = "") -> Dict[str, Any]:
    """Build an envelope.  Missing data is always rendered as ``None``."""
    return {
        "success": success,
        "data": data,
        "message": message,
        "timestamp": _timestamp(),
    }


def success_response(data: Optional[Any] = None, message: str = "Success") -> Dict[str, Any]:
    return create_response(True, data, message)


def error_response(message: str = "Error", data: Optional[Any] = None) -> Dict[str, Any]:
    return create_response(False, data, message)
