"""Create the APIBindings that are desired but missing."""

from __future__ import annotations

import logging
import threading
from typing import Iterable, Optional, Protocol, TextIO

from kcpbind.errors import AlreadyExistsError, CancelledError, KcpBindError
from kcpbind.models import APIBinding, BindingsResult, WorkspaceExportReference
from kcpbind.util.cancel import check_cancelled
from kcpbind.util.hashing import api_binding_name
from kcpbind.util.workspace import split_export

logger = logging.getLogger(__name__)


class BindingWriter(Protocol):
    def list_api_bindings(self) -> list[APIBinding]: ...

    def create_api_binding(self, binding: APIBinding) -> APIBinding: ...


def existing_exports(bindings: Iterable[APIBinding]) -> set[str]:
    """Qualified exports already bound; non-workspace references are skipped."""
    return {b.reference.qualified_name for b in bindings if b.reference is not None}


def build_api_binding(export: str) -> APIBinding:
    """Desired APIBinding for a qualified ``<workspace>:<export>``."""
    workspace, name = split_export(export)
    return APIBinding(
        name=api_binding_name(workspace, name),
        reference=WorkspaceExportReference(path=str(workspace), export_name=name),
    )


def apply_api_bindings(
    controller: BindingWriter,
    desired: Iterable[str],
    *,
    out: TextIO,
    cancel: Optional[threading.Event] = None,
) -> BindingsResult:
    """
    Create one APIBinding per desired export that is not bound yet.

    Policy:
        - Every missing export is attempted; one failure does not stop the rest.
        - AlreadyExists counts as success (another run won the race).
        - The result carries successes and errors side by side; check
          result.error before relying on the list being complete.

    Raises:
        CancelledError: if cancel is set; no create is issued after that.
        KcpBindError: only if listing the existing bindings fails.
    """
    check_cancelled(cancel)
    current = controller.list_api_bindings()
    missing = set(desired) - existing_exports(current)
    logger.info("%d APIBinding(s) to create", len(missing))

    result = BindingsResult()
    for export in sorted(missing):
        desired_binding = build_api_binding(export)
        check_cancelled(cancel)
        try:
            binding = controller.create_api_binding(desired_binding)
        except AlreadyExistsError:
            logger.warning("APIBinding %s already exists", desired_binding.name)
            binding = desired_binding
        except CancelledError:
            raise
        except KcpBindError as exc:
            logger.debug("Creating APIBinding %s failed: %s", desired_binding.name, exc)
            result.errors.append(exc)
            continue

        result.bindings.append(binding)
        try:
            out.write(f"apibinding {desired_binding.name} for apiexport {export} created.\n")
        except OSError as exc:
            result.errors.append(exc)

    return result
