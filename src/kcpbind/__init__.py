"""kcpbind public API."""

from __future__ import annotations

from kcpbind.auth import ClientFactory, KubeconfigInfo
from kcpbind.binder import ComputeBinder
from kcpbind.controller import KcpController
from kcpbind.errors import (
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
)
from kcpbind.models import (
    APIBinding,
    APIBindingPhase,
    BindingsResult,
    BindResult,
    LabelSelector,
    Placement,
    SyncTarget,
    parse_label_selector,
)
from kcpbind.options import BindComputeOptions

__all__ = [
    # High-level
    "ComputeBinder",
    "BindComputeOptions",
    "KcpController",
    # Auth
    "KubeconfigInfo",
    "ClientFactory",
    # Models
    "APIBinding",
    "APIBindingPhase",
    "Placement",
    "SyncTarget",
    "LabelSelector",
    "parse_label_selector",
    "BindResult",
    "BindingsResult",
    # Errors
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
    "ApiErrorInfo",
    "map_api_error",
]
