"""Public auth exports for kcpbind."""

from __future__ import annotations

from .client_factory import ClientFactory, parse_cluster_url
from .kubeconfig_info import KubeconfigInfo

__all__ = ["ClientFactory", "KubeconfigInfo", "parse_cluster_url"]
