"""Resolve which APIExports to bind from what the location pool supports."""

from __future__ import annotations

import logging
import threading
from typing import Iterable, Optional, Protocol

from kcpbind.errors import UnsupportedExportsError
from kcpbind.models import SyncTarget
from kcpbind.util.cancel import check_cancelled
from kcpbind.util.workspace import WorkspacePath

logger = logging.getLogger(__name__)

DEFAULT_COMPUTE_EXPORT: str = "root:compute:kubernetes"
LOCAL_KUBERNETES_EXPORT_NAME: str = "kubernetes"


class SyncTargetLister(Protocol):
    def list_sync_targets(self) -> list[SyncTarget]: ...


def collect_supported_exports(
    sync_targets: Iterable[SyncTarget],
    location_workspace: WorkspacePath,
) -> set[str]:
    """
    Union of ``<path>:<export>`` over every sync target.

    A reference without a path points at the location workspace itself;
    non-workspace references are skipped.
    """
    supported: set[str] = set()
    for target in sync_targets:
        for export in target.supported_exports:
            if export is None:
                continue
            path = export.path or str(location_workspace)
            supported.add(f"{path}:{export.export_name}")
    return supported


def default_exports(location_workspace: WorkspacePath) -> list[str]:
    return [
        DEFAULT_COMPUTE_EXPORT,
        str(location_workspace.join(LOCAL_KUBERNETES_EXPORT_NAME)),
    ]


def resolve_api_exports(
    desired: Iterable[str],
    supported: set[str],
    location_workspace: WorkspacePath,
) -> frozenset[str]:
    """
    Pick the exports to bind.

    Rules:
        - No explicit exports: take whichever default kubernetes exports
          (global and location-local) the pool supports. May be empty.
        - Explicit exports: all of them must be supported, otherwise nothing
          is returned and UnsupportedExportsError names every missing one.
    """
    wanted = frozenset(desired)
    if not wanted:
        picked = frozenset(e for e in default_exports(location_workspace) if e in supported)
        logger.info("No APIExports requested, using defaults: %s", sorted(picked))
        return picked

    unsupported = wanted - supported
    if unsupported:
        raise UnsupportedExportsError(str(location_workspace), sorted(unsupported))
    return wanted


def supported_api_exports(
    controller: SyncTargetLister,
    location_workspace: WorkspacePath,
    desired: Iterable[str],
    *,
    cancel: Optional[threading.Event] = None,
) -> frozenset[str]:
    """List the location workspace's sync targets and resolve desired exports."""
    check_cancelled(cancel)
    sync_targets = controller.list_sync_targets()
    supported = collect_supported_exports(sync_targets, location_workspace)
    logger.debug(
        "%d sync target(s) in %s support: %s",
        len(sync_targets), location_workspace, sorted(supported),
    )
    return resolve_api_exports(desired, supported, location_workspace)
