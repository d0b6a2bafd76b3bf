"""
Error classification for retry and fallback decisions.

Provider SDKs expose the HTTP status under different attribute names
(``status_code`` on openai/anthropic/httpx errors, ``status`` on plain
error payloads, or on an attached ``response``). Errors without any status
are treated as transient transport failures.
"""

from enum import Enum
from typing import Optional


class ErrorCategory(Enum):
    """Categories of errors for handling decisions."""
    CLIENT = "client"        # 4xx: never retried, never falls back
    TRANSIENT = "transient"  # 5xx or no status: retried, then falls back


def get_status_code(error: BaseException) -> Optional[int]:
    """HTTP status carried by ``error``, if any."""
    for attr in ("status", "status_code"):
        value = getattr(error, attr, None)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    response = getattr(error, "response", None)
    if response is not None:
        value = getattr(response, "status_code", None)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    return None


def is_client_error(error: BaseException) -> bool:
    status = get_status_code(error)
    return status is not None and 400 <= status < 500


def should_fallback(error: BaseException) -> bool:
    """Fallback models are only tried for server errors and transport failures."""
    status = get_status_code(error)
    return status is None or status >= 500


def classify_error(error: BaseException) -> ErrorCategory:
    return ErrorCategory.CLIENT if is_client_error(error) else ErrorCategory.TRANSIENT
