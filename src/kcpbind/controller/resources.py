"""Group/version/plural coordinates of the kcp resources we touch."""

from __future__ import annotations

from kcpbind.models import GroupVersionResource

API_BINDINGS = GroupVersionResource(group="apis.kcp.dev", version="v1alpha1", resource="apibindings")
API_BINDING_KIND: str = "APIBinding"

PLACEMENTS = GroupVersionResource(group="scheduling.kcp.dev", version="v1alpha1", resource="placements")
PLACEMENT_KIND: str = "Placement"

SYNC_TARGETS = GroupVersionResource(group="workload.kcp.dev", version="v1alpha1", resource="synctargets")

LIST_PAGE_SIZE: int = 500


def api_version(gvr: GroupVersionResource) -> str:
    return f"{gvr.group}/{gvr.version}"
