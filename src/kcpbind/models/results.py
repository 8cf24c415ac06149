"""Result models for bind-compute runs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from kcpbind.errors import AggregateError, new_aggregate

from .api_binding import APIBinding
from .placement import Placement


@dataclass(slots=True)
class BindingsResult:
    """
    Outcome of reconciling APIBindings.

    bindings and errors are not exclusive: a partial list is returned next
    to the failures.
    """

    bindings: list[APIBinding] = field(default_factory=list)
    errors: list[BaseException] = field(default_factory=list)

    @property
    def error(self) -> Optional[AggregateError]:
        return new_aggregate(self.errors)


@dataclass(slots=True)
class BindResult:
    """What a successful run created (or found) and whether it had to poll."""

    placement: Placement
    bindings: list[APIBinding] = field(default_factory=list)
    api_exports: frozenset[str] = frozenset()
    polled: bool = False
