"""Public error exports for kcpbind."""

from __future__ import annotations

from .exceptions import (
    AggregateError,
    AlreadyExistsError,
    ApiError,
    ApiErrorInfo,
    AuthError,
    ConflictError,
    InvalidArgumentError,
    KcpBindError,
    NetworkError,
    NotFoundError,
    NotReadyError,
    PermissionError,
    RateLimitError,
    UnsupportedExportsError,
    CancelledError,
    map_api_error,
    new_aggregate,
)

__all__ = [
    "KcpBindError",
    "InvalidArgumentError",
    "UnsupportedExportsError",
    "AuthError",
    "PermissionError",
    "NotFoundError",
    "ConflictError",
    "AlreadyExistsError",
    "RateLimitError",
    "NetworkError",
    "ApiError",
    "NotReadyError",
    "CancelledError",
    "AggregateError",
    "new_aggregate",
    "ApiErrorInfo",
    "map_api_error",
]
