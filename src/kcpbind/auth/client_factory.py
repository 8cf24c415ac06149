"""Build API connections scoped to kcp workspaces."""

from __future__ import annotations

import copy
import logging
from typing import Any, Optional
from urllib.parse import urlsplit, urlunsplit

from kubernetes import client, config

from kcpbind.errors import AuthError, InvalidArgumentError
from kcpbind.util.workspace import WorkspacePath

from .kubeconfig_info import KubeconfigInfo

logger = logging.getLogger(__name__)

_CLUSTERS_SEGMENT = "/clusters/"


def parse_cluster_url(host: str) -> tuple[str, WorkspacePath]:
    """
    Split a workspace URL into the server base URL and the workspace.

    ``https://kcp:6443/clusters/root:org`` -> (``https://kcp:6443``, ``root:org``)

    Raises:
        InvalidArgumentError: if host does not point at a workspace.
    """
    error = f"URL {host!r} doesn't contain a valid workspace"
    parts = urlsplit(host)
    if not parts.path:
        raise InvalidArgumentError(error, details={"host": host})

    idx = parts.path.find(_CLUSTERS_SEGMENT)
    if idx < 0:
        raise InvalidArgumentError(error, details={"host": host})

    name = parts.path[idx + len(_CLUSTERS_SEGMENT):].split("/", 1)[0]
    try:
        workspace = WorkspacePath.validated(name)
    except ValueError as exc:
        raise InvalidArgumentError(error, details={"host": host}, cause=exc) from exc

    base = urlunsplit((parts.scheme, parts.netloc, parts.path[:idx], "", ""))
    return base, workspace


class ClientFactory:
    """Load a kubeconfig once and hand out workspace-scoped ApiClients."""

    def __init__(self, info: KubeconfigInfo) -> None:
        self._info = info
        self._configuration: Optional[client.Configuration] = None

    def configuration(self) -> client.Configuration:
        """
        Return the kubeconfig-derived configuration (loaded lazily).

        Raises:
            AuthError: if the kubeconfig cannot be loaded.
        """
        if self._configuration is not None:
            return self._configuration

        configuration = client.Configuration()
        try:
            config.load_kube_config(
                config_file=self._info.config_file,
                context=self._info.context,
                client_configuration=configuration,
            )
        except Exception as exc:
            raise AuthError(
                "Failed to load kubeconfig",
                details={
                    "config_file": self._info.config_file,
                    "context": self._info.context,
                },
                cause=exc,
            ) from exc

        logger.debug("Loaded kubeconfig, server %s", configuration.host)
        self._configuration = configuration
        return configuration

    def workspace_client(self) -> Any:
        """ApiClient for the workspace the kubeconfig currently points at."""
        return client.ApiClient(configuration=self.configuration())

    def location_client(self, workspace: WorkspacePath) -> Any:
        """
        ApiClient for an arbitrary workspace on the same server.

        The current workspace is stripped from the kubeconfig host and replaced
        by ``workspace``.
        """
        base = self.configuration()
        server, current = parse_cluster_url(base.host)
        scoped = copy.deepcopy(base)
        scoped.host = server + workspace.path()
        logger.debug("Scoped connection from %s to %s", current, workspace)
        return client.ApiClient(configuration=scoped)
