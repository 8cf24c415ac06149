"""Workspace (logical cluster) paths such as ``root:org:team``."""

from __future__ import annotations

import re
from dataclasses import dataclass

SEPARATOR: str = ":"

_WORKSPACE_RE = re.compile(
    r"^[a-z0-9]([a-z0-9-]*[a-z0-9])?(:[a-z0-9]([a-z0-9-]*[a-z0-9])?)*$"
)


def is_valid_workspace(value: str) -> bool:
    return isinstance(value, str) and bool(_WORKSPACE_RE.match(value))


@dataclass(frozen=True, slots=True)
class WorkspacePath:
    """An opaque, colon-separated workspace path."""

    value: str

    @classmethod
    def validated(cls, value: str) -> "WorkspacePath":
        """Build a WorkspacePath. Raises ValueError if value is malformed."""
        if not is_valid_workspace(value):
            raise ValueError(f"invalid workspace path: {value!r}")
        return cls(value)

    def split(self) -> tuple["WorkspacePath", str]:
        """
        Split into (parent, last segment).

        ``root:org:ws`` -> (``root:org``, ``ws``). A single-segment path has an
        empty parent.
        """
        parent, _, base = self.value.rpartition(SEPARATOR)
        return WorkspacePath(parent), base

    def join(self, name: str) -> "WorkspacePath":
        if not self.value:
            return WorkspacePath(name)
        return WorkspacePath(f"{self.value}{SEPARATOR}{name}")

    def path(self) -> str:
        """URL path under which the API server serves this workspace."""
        return f"/clusters/{self.value}"

    def __str__(self) -> str:
        return self.value


def split_export(export: str) -> tuple[WorkspacePath, str]:
    """
    Split a qualified export ``<workspace>:<export-name>``.

    Raises:
        ValueError: if the export is not qualified with a workspace path.
    """
    workspace, name = WorkspacePath(export).split()
    if not workspace.value or not name:
        raise ValueError(f"APIExport must be in the form <workspace>:<name>: {export!r}")
    return workspace, name
