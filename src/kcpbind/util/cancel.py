from __future__ import annotations

import threading
from typing import Optional

from kcpbind.errors import CancelledError


def check_cancelled(cancel: Optional[threading.Event]) -> None:
    """Raise CancelledError if cancel has been set."""
    if cancel is not None and cancel.is_set():
        raise CancelledError("operation cancelled")
