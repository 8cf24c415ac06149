"""Internal controller exports for kcpbind."""

from __future__ import annotations

from .kcp_controller import KcpController

__all__ = ["KcpController"]
