"""SyncTarget: one schedulable location, read only."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True, slots=True)
class SupportedExport:
    """
    An APIExport a sync target can serve.

    An empty path means the export lives in the sync target's own workspace.
    """

    export_name: str
    path: str = ""


@dataclass(slots=True)
class SyncTarget:
    name: str
    # None entries stand for non-workspace export references.
    supported_exports: list[Optional[SupportedExport]] = field(default_factory=list)
