"""Connection information for kcpbind (kubeconfig only)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(slots=True, frozen=True)
class KubeconfigInfo:
    """
    Where to find credentials for the kcp API server.

    Attributes:
        config_file: Path to a kubeconfig. None falls back to $KUBECONFIG or
            ~/.kube/config, as kubectl does.
        context: Kubeconfig context to use. None means the current context.
    """

    config_file: Optional[str] = None
    context: Optional[str] = None

    def __post_init__(self) -> None:
        for key in ("config_file", "context"):
            value = getattr(self, key)
            if value is not None and (not isinstance(value, str) or not value.strip()):
                raise ValueError(f"KubeconfigInfo.{key} must be None or a non-empty string")
