"""ComputeBinder: binds a workspace to compute in a location workspace."""

from __future__ import annotations

import contextlib
import logging
import sys
import threading
from typing import Callable, Iterator, Optional, TextIO, Tuple

from kcpbind.auth import ClientFactory, KubeconfigInfo
from kcpbind.controller import KcpController
from kcpbind.models import BindResult
from kcpbind.options import BindComputeOptions
from kcpbind.reconcile import (
    apply_api_bindings,
    apply_placement,
    build_placement,
    supported_api_exports,
    wait_for_ready,
)
from kcpbind.util.time import format_duration
from kcpbind.util.workspace import WorkspacePath

logger = logging.getLogger(__name__)


class ComputeBinder:
    """
    High-level runner: discover exports -> bind -> place -> wait.

    Policy:
        - Fail-fast: the first failing step raises and later steps are skipped.
        - No rollback: bindings and placements already created stay in place.
        - Connections opened by run() are closed before it returns.
    """

    def __init__(self, kubeconfig: KubeconfigInfo, *, out: Optional[TextIO] = None) -> None:
        self._factory: Optional[ClientFactory] = ClientFactory(kubeconfig)
        self._controllers: Optional[Tuple[KcpController, KcpController]] = None
        self._out = out

    @classmethod
    def from_controllers(
        cls,
        workspace_controller: KcpController,
        location_controller: KcpController,
        *,
        out: Optional[TextIO] = None,
    ) -> "ComputeBinder":
        """Create binder with injected controllers (useful for tests)."""
        obj = cls.__new__(cls)
        obj._factory = None
        obj._controllers = (workspace_controller, location_controller)
        obj._out = out
        return obj

    @property
    def out(self) -> TextIO:
        return self._out if self._out is not None else sys.stdout

    @contextlib.contextmanager
    def _connect(
        self,
        location_workspace: WorkspacePath,
        cancel: Optional[threading.Event],
    ) -> Iterator[Tuple[KcpController, KcpController]]:
        # Injected controllers are owned by the caller.
        if self._controllers is not None:
            yield self._controllers
            return

        assert self._factory is not None
        workspace = KcpController(self._factory.workspace_client(), cancel=cancel)
        try:
            location = KcpController(
                self._factory.location_client(location_workspace), cancel=cancel
            )
            try:
                yield workspace, location
            finally:
                location.close()
        finally:
            workspace.close()

    def run(
        self,
        options: BindComputeOptions,
        *,
        cancel: Optional[threading.Event] = None,
        sleep: Optional[Callable[[float], None]] = None,
    ) -> BindResult:
        """
        Bind the current workspace to the location workspace in options.

        cancel is checked before every remote call, including retry
        backoff and readiness polling.

        Raises:
            UnsupportedExportsError: if requested exports are not offered.
            AggregateError: if any APIBinding could not be created.
            NotReadyError: if bindings/placement do not converge in time.
            CancelledError: if cancel is set before the run completes.
            KcpBindError: for any other remote failure.
        """
        with self._connect(options.location_workspace, cancel) as (workspace, location):
            exports = supported_api_exports(
                location,
                options.location_workspace,
                options.api_exports,
                cancel=cancel,
            )

            bindings = apply_api_bindings(workspace, exports, out=self.out, cancel=cancel)
            if bindings.error is not None:
                raise bindings.error

            desired = build_placement(
                options.placement_name,
                options.namespace_selector,
                options.location_selectors,
                options.location_workspace,
            )
            placement = apply_placement(workspace, desired, out=self.out, cancel=cancel)

            logger.info(
                "Waiting up to %s for placement %s and %d APIBinding(s)",
                format_duration(options.timeout), placement.name, len(bindings.bindings),
            )
            polled = wait_for_ready(
                workspace,
                bindings.bindings,
                placement,
                options.timeout,
                cancel=cancel,
                sleep=sleep,
            )

        return BindResult(
            placement=placement,
            bindings=list(bindings.bindings),
            api_exports=exports,
            polled=polled,
        )
