"""Typed exceptions for EndPointMonitor client and engine errors."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .diagnostics import Diagnostics


class EndPointMonitorError(Exception):
    """Base exception for all endpointmonitor errors."""


class TransportError(EndPointMonitorError):
    """The remote call failed: network, auth, or protocol problem."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: Any = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class AuthenticationError(TransportError):
    """401 Unauthorized - invalid or missing API key."""


class ForbiddenError(TransportError):
    """403 Forbidden - the API key lacks permission."""


class NotFoundError(TransportError):
    """404 Not Found - the remote object does not exist (any more)."""


class ValidationError(TransportError):
    """400 Bad Request - the service rejected the payload."""


class ConflictError(TransportError):
    """409 Conflict - state conflict on the service."""


class RateLimitError(TransportError):
    """429 Too Many Requests - rate limit exceeded."""

    def __init__(
        self,
        message: str,
        *,
        retry_after: float | None = None,
        status_code: int | None = 429,
        body: Any = None,
    ) -> None:
        super().__init__(message, status_code=status_code, body=body)
        self.retry_after = retry_after


class ServerError(TransportError):
    """5xx Server Error - something went wrong on the service."""


class ProtocolError(TransportError):
    """The service answered with a payload we cannot interpret."""


class MatchErrorKind(str, Enum):
    NO_MATCH = "no_match"
    AMBIGUOUS_MATCH = "ambiguous_match"


class AmbiguityError(EndPointMonitorError):
    """A singleton search did not return exactly one match."""

    def __init__(self, message: str, *, kind: MatchErrorKind, count: int) -> None:
        super().__init__(message)
        self.kind = kind
        self.count = count


class DiagnosticsError(EndPointMonitorError):
    """Raised by :meth:`Diagnostics.raise_on_error` when errors were collected."""

    def __init__(self, diagnostics: Diagnostics) -> None:
        lines = [f"{d.summary}: {d.detail}" for d in diagnostics.errors]
        super().__init__("\n".join(lines))
        self.diagnostics = diagnostics


class ConfigurationError(DiagnosticsError):
    """Connection parameters are unknown, missing or empty."""
