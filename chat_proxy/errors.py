"""
Shared error primitives so the handler can map failures to client-safe responses.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class ErrorType(str, Enum):
    METHOD_NOT_ALLOWED = "method_not_allowed"
    NOT_CONFIGURED = "not_configured"
    INVALID_MESSAGE = "invalid_message"
    UPSTREAM_FAILURE = "upstream_failure"


ERROR_STATUS: Dict[ErrorType, int] = {
    ErrorType.METHOD_NOT_ALLOWED: 405,
    ErrorType.NOT_CONFIGURED: 500,
    ErrorType.INVALID_MESSAGE: 400,
    ErrorType.UPSTREAM_FAILURE: 500,
}

ERROR_MESSAGES: Dict[ErrorType, str] = {
    ErrorType.METHOD_NOT_ALLOWED: "Method not allowed",
    ErrorType.NOT_CONFIGURED: "API key not configured",
    ErrorType.INVALID_MESSAGE: "Invalid message",
    ErrorType.UPSTREAM_FAILURE: "Something went wrong. Please try again.",
}


@dataclass(frozen=True)
class ChatProxyError(Exception):
    error_type: ErrorType
    message: str = ""
    details: Optional[Dict[str, Any]] = None

    @classmethod
    def of(cls, error_type: ErrorType, **details: Any) -> "ChatProxyError":
        return cls(error_type, ERROR_MESSAGES[error_type], details or None)

    @property
    def status_code(self) -> int:
        return ERROR_STATUS[self.error_type]

    def to_payload(self) -> Dict[str, Any]:
        # details stay server-side
        return {"error": self.message or ERROR_MESSAGES[self.error_type]}


class UpstreamError(Exception):
    """
    Raised by a completion provider when no usable reply was produced.
    """

    def __init__(self, message: str, *, status_code: Optional[int] = None, body: Optional[str] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


__all__ = ["ChatProxyError", "ErrorType", "ERROR_MESSAGES", "ERROR_STATUS", "UpstreamError"]
