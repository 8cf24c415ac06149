"""Block until bindings are Bound and the placement is Ready."""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional, Protocol, Sequence

from kcpbind.errors import NotReadyError
from kcpbind.models import APIBinding, Placement
from kcpbind.util.cancel import check_cancelled

logger = logging.getLogger(__name__)

POLL_INTERVAL_SEC: float = 0.5


class StatusReader(Protocol):
    def get_placement(self, name: str, *, retry: bool = True) -> Placement: ...

    def get_api_binding(self, name: str, *, retry: bool = True) -> APIBinding: ...


def bind_ready(bindings: Sequence[APIBinding], placement: Placement) -> bool:
    """True iff the placement is Ready and every binding is Bound."""
    if not placement.is_ready:
        return False
    return all(b.is_bound for b in bindings)


def poll_immediate(
    interval: float,
    timeout: float,
    condition: Callable[[], bool],
    *,
    cancel: Optional[threading.Event] = None,
    clock: Callable[[], float] = time.monotonic,
    sleep: Optional[Callable[[float], None]] = None,
) -> bool:
    """
    Evaluate condition now, then every interval seconds until timeout.

    Returns:
        True once condition returns True, False if the deadline passes first.

    Raises:
        CancelledError: if cancel is set before a check or during a pause.
        Any exception raised by condition, unchanged.
    """
    deadline = clock() + timeout
    while True:
        check_cancelled(cancel)
        if condition():
            return True

        remaining = deadline - clock()
        if remaining <= 0:
            return False

        pause = min(interval, remaining)
        if sleep is not None:
            sleep(pause)
        elif cancel is not None:
            cancel.wait(pause)
        else:
            time.sleep(pause)


def wait_for_ready(
    controller: StatusReader,
    bindings: Sequence[APIBinding],
    placement: Placement,
    timeout: float,
    *,
    cancel: Optional[threading.Event] = None,
    interval: float = POLL_INTERVAL_SEC,
    clock: Callable[[], float] = time.monotonic,
    sleep: Optional[Callable[[float], None]] = None,
) -> bool:
    """
    Wait for convergence of the given bindings and placement.

    The objects passed in are checked first without any request; only if
    they are not ready yet is the server polled, re-reading the placement
    and each binding by name on every tick. Reads are not retried: the
    first transport or API error aborts the wait.

    Returns:
        False if already converged (nothing was polled), True if polling
        observed convergence.

    Raises:
        NotReadyError: if not converged within timeout.
        CancelledError: if cancel is set.
        KcpBindError: on the first failed read.
    """
    if bind_ready(bindings, placement):
        return False

    names = [b.name for b in bindings]

    def _converged() -> bool:
        check_cancelled(cancel)
        current_placement = controller.get_placement(placement.name, retry=False)
        current_bindings = []
        for name in names:
            check_cancelled(cancel)
            current_bindings.append(controller.get_api_binding(name, retry=False))
        ready = bind_ready(current_bindings, current_placement)
        logger.debug("Placement %s ready=%s", placement.name, ready)
        return ready

    converged = poll_immediate(
        interval,
        timeout,
        _converged,
        cancel=cancel,
        clock=clock,
        sleep=sleep,
    )
    if not converged:
        raise NotReadyError(
            f"bind compute is not ready {placement.name}: timed out waiting for the condition",
            details={"placement": placement.name, "timeout": timeout},
        )
    return True
