"""Client-side reconciliation steps for bind compute."""

from __future__ import annotations

from .bindings import apply_api_bindings, build_api_binding, existing_exports
from .exports import (
    collect_supported_exports,
    resolve_api_exports,
    supported_api_exports,
)
from .placement import apply_placement, build_placement
from .wait import POLL_INTERVAL_SEC, bind_ready, poll_immediate, wait_for_ready

__all__ = [
    "collect_supported_exports",
    "resolve_api_exports",
    "supported_api_exports",
    "existing_exports",
    "build_api_binding",
    "apply_api_bindings",
    "build_placement",
    "apply_placement",
    "POLL_INTERVAL_SEC",
    "bind_ready",
    "poll_immediate",
    "wait_for_ready",
]
