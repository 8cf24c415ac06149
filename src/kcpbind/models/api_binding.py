"""APIBinding: imports one APIExport into the caller's workspace."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class APIBindingPhase(str, Enum):
    """Lifecycle phase reported in APIBinding status."""

    PENDING = "Pending"
    BINDING = "Binding"
    BOUND = "Bound"
    FAILED = "Failed"


@dataclass(frozen=True, slots=True)
class WorkspaceExportReference:
    """Points at an APIExport by workspace path and export name."""

    path: str
    export_name: str

    @property
    def qualified_name(self) -> str:
        return f"{self.path}:{self.export_name}"


@dataclass(slots=True)
class APIBinding:
    """
    An APIBinding as seen by this tool.

    Notes:
        - reference is None for bindings that import from a non-workspace
          source; those are ignored by reconciliation.
        - phase is None until the binding controller has reported a status.
    """

    name: str
    reference: Optional[WorkspaceExportReference] = None
    phase: Optional[APIBindingPhase] = None

    @property
    def is_bound(self) -> bool:
        return self.phase is APIBindingPhase.BOUND
