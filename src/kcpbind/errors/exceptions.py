"""Exception hierarchy and API status mapping for kcpbind."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Sequence


class KcpBindError(Exception):
    """
    Base exception for kcpbind.

    Attributes:
        details: Optional structured information (e.g., HTTP status, reason).
        cause: Optional original exception that triggered this error.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.details = details or {}
        self.cause = cause


class InvalidArgumentError(KcpBindError):
    """Raised when user input or request arguments are invalid."""


class UnsupportedExportsError(KcpBindError):
    """Raised when requested APIExports are not offered by the location pool."""

    def __init__(self, workspace: str, unsupported: Sequence[str]) -> None:
        self.workspace = workspace
        self.unsupported = sorted(unsupported)
        super().__init__(
            "the following APIExports are not supported by the synctargets "
            f"in workspace {workspace}: {','.join(self.unsupported)}",
            details={"workspace": workspace, "unsupported": self.unsupported},
        )


class AuthError(KcpBindError):
    """Raised when the API server rejects our credentials (HTTP 401)."""


class PermissionError(KcpBindError):
    """Raised when access is denied (HTTP 403)."""


class NotFoundError(KcpBindError):
    """Raised when a resource is not found (HTTP 404)."""


class ConflictError(KcpBindError):
    """Raised when a write conflicts with server state (HTTP 409)."""


class AlreadyExistsError(ConflictError):
    """Raised when creating a resource whose name is already taken."""


class RateLimitError(KcpBindError):
    """Raised when rate-limited (HTTP 429)."""


class NetworkError(KcpBindError):
    """Raised when network/timeout issues prevent the request."""


class ApiError(KcpBindError):
    """Raised for unclassified API errors (5xx, unknown 4xx, etc.)."""


class NotReadyError(KcpBindError):
    """Raised when bindings/placement did not converge before the timeout."""


class CancelledError(KcpBindError):
    """Raised when a run is cancelled from outside before it finished."""


class AggregateError(KcpBindError):
    """Several independent failures reported as one."""

    def __init__(self, errors: Sequence[BaseException]) -> None:
        self.errors = list(errors)
        if len(self.errors) == 1:
            message = str(self.errors[0])
        else:
            message = "[" + ", ".join(str(e) for e in self.errors) + "]"
        super().__init__(message, cause=self.errors[0] if self.errors else None)


def new_aggregate(errors: Sequence[BaseException]) -> Optional[AggregateError]:
    """Return an AggregateError for a non-empty list, None otherwise."""
    if not errors:
        return None
    return AggregateError(errors)


@dataclass(frozen=True)
class ApiErrorInfo:
    """Lightweight API error information for mapping to kcpbind exceptions."""

    status_code: int
    reason: str | None = None
    message: str | None = None
    details: dict[str, Any] | None = None


def map_api_error(
    info: ApiErrorInfo,
    *,
    cause: Optional[BaseException] = None,
) -> KcpBindError:
    """
    Map an API server error to a kcpbind exception.

    Policy:
        - 400/422 -> InvalidArgumentError
        - 401 -> AuthError
        - 403 -> PermissionError
        - 404 -> NotFoundError
        - 409 -> AlreadyExistsError if reason is AlreadyExists, else ConflictError
        - 429 -> RateLimitError
        - otherwise -> ApiError
    """
    details: dict[str, Any] = {
        "status_code": info.status_code,
        "reason": info.reason,
    }
    if info.details:
        details.update(info.details)

    message = info.message or f"HTTP error {info.status_code}"

    if info.status_code in (400, 422):
        return InvalidArgumentError(message, details=details, cause=cause)
    if info.status_code == 401:
        return AuthError(message, details=details, cause=cause)
    if info.status_code == 403:
        return PermissionError(message, details=details, cause=cause)
    if info.status_code == 404:
        return NotFoundError(message, details=details, cause=cause)
    if info.status_code == 409:
        if info.reason == "AlreadyExists":
            return AlreadyExistsError(message, details=details, cause=cause)
        return ConflictError(message, details=details, cause=cause)
    if info.status_code == 429:
        return RateLimitError(message, details=details, cause=cause)

    return ApiError(message, details=details, cause=cause)
