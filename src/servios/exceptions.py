"""Structured exception classes for servios."""

import json
from typing import Any, Dict, Optional


class ServiosError(Exception):
    """Root of the servios exception tree.

    Request and configuration failures both carry a ``code`` (the class name
    unless given) and a ``details`` mapping, and render to the same
    ``{"error", "message", "details"}`` shape for hosts that report errors as
    data.

    :param message: Text shown to the caller
    :param code: Stable identifier; defaults to the exception class name
    :param details: Extra context, e.g. the failing setting or status code
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Render as ``{"error": code, "message": ..., "details": {...}}``."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }

    def to_json(self) -> str:
        """JSON form of :meth:`to_dict`; unserializable details use ``str``."""
        return json.dumps(self.to_dict(), default=str)


class RequestError(ServiosError):
    """Raised when a request fails at the transport level or with a non-2xx status.

    The payload is whatever the configured error transform produced from
    the underlying transport error, so callers always see one normalized
    shape regardless of how the request failed.

    :param payload: Normalized error payload (by default the response body,
                    or ``{"message": ...}`` when there was no response)
    :param status_code: Optional HTTP status code of the failed response
    """

    def __init__(self, payload: Any, status_code: Optional[int] = None):
        """Initialize request error with payload and optional status code."""
        details: Dict[str, Any] = {}
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(
            message=_message_from_payload(payload),
            code="REQUEST_ERROR",
            details=details,
        )
        self.payload = payload
        self.status_code = status_code


class ConfigurationError(ServiosError):
    """Raised for configuration-related errors.

    This exception is raised at construction time when required
    configuration settings are missing or invalid.

    :param message: Description of the configuration error
    :param setting: Optional name of the problematic setting
    """

    def __init__(self, message: str, setting: Optional[str] = None):
        """Initialize configuration error with message and optional setting."""
        details = {}
        if setting:
            details["setting"] = setting
        super().__init__(message=message, code="CONFIGURATION_ERROR", details=details)
        self.setting = setting


def _message_from_payload(payload: Any) -> str:
    if isinstance(payload, dict):
        message = payload.get("message") or payload.get("error")
        if message:
            return str(message)
    elif isinstance(payload, str) and payload:
        return payload
    return "Request failed"
