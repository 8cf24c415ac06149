"""Validated, immutable input for a bind-compute run."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from kcpbind.errors import InvalidArgumentError
from kcpbind.models import LabelSelector, parse_label_selector
from kcpbind.util.hashing import placement_name
from kcpbind.util.workspace import WorkspacePath, split_export

# The string form of the match-everything selector.
EVERYTHING: str = ""

DEFAULT_TIMEOUT_SEC: float = 30.0


@dataclass(frozen=True)
class BindComputeOptions:
    """
    Everything a run needs, parsed and validated up front.

    Build with complete(); the constructor does no validation.
    """

    location_workspace: WorkspacePath
    placement_name: str
    api_exports: frozenset[str]
    namespace_selector: LabelSelector
    location_selectors: tuple[LabelSelector, ...]
    timeout: float = DEFAULT_TIMEOUT_SEC

    @classmethod
    def complete(
        cls,
        args: Sequence[str],
        *,
        api_exports: Iterable[str] = (),
        namespace_selector: str = EVERYTHING,
        location_selectors: Optional[Sequence[str]] = None,
        name: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT_SEC,
    ) -> "BindComputeOptions":
        """
        Validate raw input and derive what is missing.

        Raises:
            InvalidArgumentError: on any invalid input. Nothing remote has
                been touched at this point.
        """
        if len(args) != 1:
            raise InvalidArgumentError("a location workspace should be specified")
        try:
            location_workspace = WorkspacePath.validated(args[0])
        except ValueError as exc:
            raise InvalidArgumentError(
                "location workspace type is incorrect",
                details={"location_workspace": args[0]},
                cause=exc,
            ) from exc

        try:
            ns_selector = parse_label_selector(namespace_selector)
        except ValueError as exc:
            raise InvalidArgumentError(
                f"namespace selector format not correct: {exc}", cause=exc
            ) from exc

        raw_location_selectors = (
            list(location_selectors) if location_selectors else [EVERYTHING]
        )
        loc_selectors: list[LabelSelector] = []
        for raw in raw_location_selectors:
            try:
                loc_selectors.append(parse_label_selector(raw))
            except ValueError as exc:
                raise InvalidArgumentError(
                    f"location selector {raw} format not correct: {exc}", cause=exc
                ) from exc

        exports = frozenset(e.strip() for e in api_exports if e.strip())
        for export in exports:
            try:
                split_export(export)
            except ValueError as exc:
                raise InvalidArgumentError(str(exc), cause=exc) from exc

        if timeout <= 0:
            raise InvalidArgumentError("timeout must be positive", details={"timeout": timeout})

        if not name:
            name = placement_name(namespace_selector, raw_location_selectors, location_workspace)

        return cls(
            location_workspace=location_workspace,
            placement_name=name,
            api_exports=exports,
            namespace_selector=ns_selector,
            location_selectors=tuple(loc_selectors),
            timeout=timeout,
        )
