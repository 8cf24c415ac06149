"""Public model exports for kcpbind."""

from __future__ import annotations

from .api_binding import APIBinding, APIBindingPhase, WorkspaceExportReference
from .label_selector import LabelSelector, LabelSelectorRequirement, parse_label_selector
from .placement import (
    PLACEMENT_READY,
    SYNC_TARGETS_RESOURCE,
    Condition,
    GroupVersionResource,
    Placement,
)
from .results import BindingsResult, BindResult
from .sync_target import SupportedExport, SyncTarget

__all__ = [
    "APIBinding",
    "APIBindingPhase",
    "WorkspaceExportReference",
    "LabelSelector",
    "LabelSelectorRequirement",
    "parse_label_selector",
    "Placement",
    "Condition",
    "GroupVersionResource",
    "PLACEMENT_READY",
    "SYNC_TARGETS_RESOURCE",
    "SupportedExport",
    "SyncTarget",
    "BindResult",
    "BindingsResult",
]
