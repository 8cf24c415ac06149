"""Placement: schedules selected namespaces onto selected locations."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .label_selector import LabelSelector

PLACEMENT_READY: str = "Ready"


@dataclass(frozen=True, slots=True)
class GroupVersionResource:
    group: str
    version: str
    resource: str


SYNC_TARGETS_RESOURCE = GroupVersionResource(
    group="workload.kcp.dev",
    version="v1alpha1",
    resource="synctargets",
)


@dataclass(frozen=True, slots=True)
class Condition:
    type: str
    status: str
    reason: Optional[str] = None
    message: Optional[str] = None


@dataclass(slots=True)
class Placement:
    """A Placement as written and observed by this tool."""

    name: str
    namespace_selector: LabelSelector = field(default_factory=LabelSelector)
    location_selectors: list[LabelSelector] = field(default_factory=list)
    location_workspace: str = ""
    location_resource: GroupVersionResource = SYNC_TARGETS_RESOURCE
    conditions: list[Condition] = field(default_factory=list)

    def get_condition(self, condition_type: str) -> Optional[Condition]:
        for cond in self.conditions:
            if cond.type == condition_type:
                return cond
        return None

    def is_condition_true(self, condition_type: str) -> bool:
        cond = self.get_condition(condition_type)
        return cond is not None and cond.status == "True"

    @property
    def is_ready(self) -> bool:
        return self.is_condition_true(PLACEMENT_READY)
