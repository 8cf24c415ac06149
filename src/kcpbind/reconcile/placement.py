"""Create the Placement linking namespaces to locations."""

from __future__ import annotations

import logging
import threading
from typing import Optional, Protocol, Sequence, TextIO

from kcpbind.errors import AlreadyExistsError
from kcpbind.models import SYNC_TARGETS_RESOURCE, LabelSelector, Placement
from kcpbind.util.cancel import check_cancelled
from kcpbind.util.workspace import WorkspacePath

logger = logging.getLogger(__name__)


class PlacementWriter(Protocol):
    def create_placement(self, placement: Placement) -> Placement: ...


def build_placement(
    name: str,
    namespace_selector: LabelSelector,
    location_selectors: Sequence[LabelSelector],
    location_workspace: WorkspacePath,
) -> Placement:
    return Placement(
        name=name,
        namespace_selector=namespace_selector,
        location_selectors=list(location_selectors),
        location_workspace=str(location_workspace),
        location_resource=SYNC_TARGETS_RESOURCE,
    )


def apply_placement(
    controller: PlacementWriter,
    placement: Placement,
    *,
    out: TextIO,
    cancel: Optional[threading.Event] = None,
) -> Placement:
    """
    Create the placement, tolerating AlreadyExists.

    On AlreadyExists the desired object is returned as is: it carries the
    name but no status, so callers must re-fetch to observe readiness.
    """
    check_cancelled(cancel)
    try:
        created = controller.create_placement(placement)
    except AlreadyExistsError:
        logger.warning("Placement %s already exists", placement.name)
        created = placement

    out.write(f"placement {placement.name} created.\n")
    return created
