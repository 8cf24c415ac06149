"""kcp resource controller (internal use only)."""

from __future__ import annotations

import json
import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional, TypeVar

import urllib3
from kubernetes import client
from kubernetes.client.exceptions import ApiException

from kcpbind.errors import (
    ApiError,
    ApiErrorInfo,
    NetworkError,
    RateLimitError,
    map_api_error,
)
from kcpbind.models import (
    APIBinding,
    APIBindingPhase,
    Condition,
    GroupVersionResource,
    LabelSelector,
    Placement,
    SupportedExport,
    SyncTarget,
    WorkspaceExportReference,
)
from kcpbind.util.cancel import check_cancelled

from .resources import (
    API_BINDING_KIND,
    API_BINDINGS,
    LIST_PAGE_SIZE,
    PLACEMENT_KIND,
    PLACEMENTS,
    SYNC_TARGETS,
    api_version,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class _RetryPolicy:
    max_retries: int = 3
    initial_delay_sec: float = 1.0


class KcpController:
    """
    Typed access to APIBindings, Placements and SyncTargets of one workspace.

    Notes:
        - The underlying CustomObjectsApi is NOT exposed.
        - All resources are cluster scoped within the workspace.
        - Once cancel is set, no further request (or retry) is issued.
    """

    def __init__(self, api_client: Any, *, cancel: Optional[threading.Event] = None) -> None:
        self._retry_policy = _RetryPolicy()
        self._cancel = cancel
        self._api_client = api_client
        self._api = client.CustomObjectsApi(api_client)

    @classmethod
    def from_api(
        cls,
        api: Any,
        *,
        retry_policy: Optional[_RetryPolicy] = None,
        cancel: Optional[threading.Event] = None,
    ) -> "KcpController":
        """Create controller from a pre-built CustomObjectsApi (useful for tests)."""
        obj = cls.__new__(cls)
        obj._retry_policy = retry_policy or _RetryPolicy()
        obj._cancel = cancel
        obj._api_client = None
        obj._api = api
        return obj

    def close(self) -> None:
        """Release the connection pool of the underlying ApiClient."""
        if self._api_client is not None:
            self._api_client.close()
            self._api_client = None

    # ----------------------------
    # APIBindings
    # ----------------------------
    def list_api_bindings(self) -> list[APIBinding]:
        return [_dict_to_api_binding(item) for item in self._list(API_BINDINGS)]

    def get_api_binding(self, name: str, *, retry: bool = True) -> APIBinding:
        data = self._get(API_BINDINGS, name, retry=retry)
        return _dict_to_api_binding(data)

    def create_api_binding(self, binding: APIBinding) -> APIBinding:
        data = self._create(API_BINDINGS, _api_binding_to_body(binding))
        return _dict_to_api_binding(data)

    # ----------------------------
    # Placements
    # ----------------------------
    def get_placement(self, name: str, *, retry: bool = True) -> Placement:
        data = self._get(PLACEMENTS, name, retry=retry)
        return _dict_to_placement(data)

    def create_placement(self, placement: Placement) -> Placement:
        data = self._create(PLACEMENTS, _placement_to_body(placement))
        return _dict_to_placement(data)

    # ----------------------------
    # SyncTargets
    # ----------------------------
    def list_sync_targets(self) -> list[SyncTarget]:
        return [_dict_to_sync_target(item) for item in self._list(SYNC_TARGETS)]

    # ----------------------------
    # Internals
    # ----------------------------
    def _list(self, gvr: GroupVersionResource) -> list[dict[str, Any]]:
        items: list[dict[str, Any]] = []
        continue_token: Optional[str] = None

        while True:
            kwargs: dict[str, Any] = {"limit": LIST_PAGE_SIZE}
            if continue_token:
                kwargs["_continue"] = continue_token

            logger.debug("LIST %s (continue=%s)", gvr.resource, bool(continue_token))
            data = self._execute(
                lambda: self._api.list_cluster_custom_object(
                    gvr.group, gvr.version, gvr.resource, **kwargs
                )
            )
            items.extend(data.get("items") or [])

            continue_token = (data.get("metadata") or {}).get("continue")
            if not continue_token:
                break

        return items

    def _get(self, gvr: GroupVersionResource, name: str, *, retry: bool) -> dict[str, Any]:
        logger.debug("GET %s/%s", gvr.resource, name)
        return self._execute(
            lambda: self._api.get_cluster_custom_object(
                gvr.group, gvr.version, gvr.resource, name
            ),
            retry=retry,
        )

    def _create(self, gvr: GroupVersionResource, body: dict[str, Any]) -> dict[str, Any]:
        logger.debug("CREATE %s/%s", gvr.resource, body["metadata"]["name"])
        return self._execute(
            lambda: self._api.create_cluster_custom_object(
                gvr.group, gvr.version, gvr.resource, body
            )
        )

    def _execute(self, func: Callable[[], T], *, retry: bool = True) -> T:
        max_retries = self._retry_policy.max_retries if retry else 0
        delay = self._retry_policy.initial_delay_sec
        for attempt in range(max_retries + 1):
            check_cancelled(self._cancel)
            try:
                return func()
            except Exception as exc:
                mapped = self._map_exception(exc)
                if self._should_retry(mapped) and attempt < max_retries:
                    logger.warning(
                        "Retrying after %s (attempt %d/%d): %s",
                        type(mapped).__name__, attempt + 1, max_retries, mapped,
                    )
                    if self._cancel is not None:
                        self._cancel.wait(delay)
                    else:
                        time.sleep(delay)
                    delay *= 2
                    continue
                raise mapped from exc

        raise ApiError("Unexpected retry loop termination")

    def _should_retry(self, exc: Exception) -> bool:
        if isinstance(exc, RateLimitError):
            return True
        if isinstance(exc, NetworkError):
            return True
        if isinstance(exc, ApiError):
            status_code = getattr(exc, "details", {}).get("status_code")
            return isinstance(status_code, int) and 500 <= status_code <= 599
        return False

    def _map_exception(self, exc: Exception) -> Exception:
        if isinstance(exc, ApiException):
            info = _api_exception_to_info(exc)
            return map_api_error(info, cause=exc)

        if isinstance(exc, (urllib3.exceptions.HTTPError, OSError, TimeoutError)):
            return NetworkError("Network error", cause=exc)

        return ApiError("kcp API error", cause=exc)


def _api_binding_to_body(binding: APIBinding) -> dict[str, Any]:
    body: dict[str, Any] = {
        "apiVersion": api_version(API_BINDINGS),
        "kind": API_BINDING_KIND,
        "metadata": {"name": binding.name},
        "spec": {},
    }
    if binding.reference is not None:
        body["spec"]["reference"] = {
            "workspace": {
                "path": binding.reference.path,
                "exportName": binding.reference.export_name,
            }
        }
    return body


def _placement_to_body(placement: Placement) -> dict[str, Any]:
    resource = placement.location_resource
    return {
        "apiVersion": api_version(PLACEMENTS),
        "kind": PLACEMENT_KIND,
        "metadata": {"name": placement.name},
        "spec": {
            "namespaceSelector": placement.namespace_selector.to_dict(),
            "locationSelectors": [s.to_dict() for s in placement.location_selectors],
            "locationWorkspace": placement.location_workspace,
            "locationResource": {
                "group": resource.group,
                "version": resource.version,
                "resource": resource.resource,
            },
        },
    }


def _dict_to_api_binding(data: dict[str, Any]) -> APIBinding:
    name = (data.get("metadata") or {}).get("name", "")
    spec = data.get("spec") or {}
    status = data.get("status") or {}

    reference = None
    workspace = (spec.get("reference") or {}).get("workspace")
    if isinstance(workspace, dict):
        reference = WorkspaceExportReference(
            path=workspace.get("path") or "",
            export_name=workspace.get("exportName") or "",
        )

    phase = None
    raw_phase = status.get("phase")
    if isinstance(raw_phase, str) and raw_phase:
        try:
            phase = APIBindingPhase(raw_phase)
        except ValueError:
            phase = None

    return APIBinding(
        name=name if isinstance(name, str) else "",
        reference=reference,
        phase=phase,
    )


def _dict_to_placement(data: dict[str, Any]) -> Placement:
    name = (data.get("metadata") or {}).get("name", "")
    spec = data.get("spec") or {}
    status = data.get("status") or {}

    resource = spec.get("locationResource") or {}
    conditions = [
        Condition(
            type=c.get("type", ""),
            status=c.get("status", ""),
            reason=c.get("reason"),
            message=c.get("message"),
        )
        for c in status.get("conditions") or []
        if isinstance(c, dict)
    ]

    return Placement(
        name=name if isinstance(name, str) else "",
        namespace_selector=LabelSelector.from_dict(spec.get("namespaceSelector")),
        location_selectors=[
            LabelSelector.from_dict(s) for s in spec.get("locationSelectors") or []
        ],
        location_workspace=spec.get("locationWorkspace") or "",
        location_resource=GroupVersionResource(
            group=resource.get("group", ""),
            version=resource.get("version", ""),
            resource=resource.get("resource", ""),
        ),
        conditions=conditions,
    )


def _dict_to_sync_target(data: dict[str, Any]) -> SyncTarget:
    name = (data.get("metadata") or {}).get("name", "")
    spec = data.get("spec") or {}

    exports: list[Optional[SupportedExport]] = []
    for ref in spec.get("supportedAPIExports") or []:
        workspace = ref.get("workspace") if isinstance(ref, dict) else None
        if not isinstance(workspace, dict):
            exports.append(None)
            continue
        exports.append(
            SupportedExport(
                export_name=workspace.get("exportName") or "",
                path=workspace.get("path") or "",
            )
        )

    return SyncTarget(name=name if isinstance(name, str) else "", supported_exports=exports)


def _api_exception_to_info(exc: ApiException) -> ApiErrorInfo:
    status_code = getattr(exc, "status", None)
    reason = getattr(exc, "reason", None)

    message = None
    details: dict[str, Any] = {}

    body = getattr(exc, "body", None)
    if isinstance(body, (bytes, bytearray)):
        body = body.decode("utf-8", errors="replace")
    if isinstance(body, str) and body:
        try:
            payload = json.loads(body)
        except ValueError:
            payload = None
        if isinstance(payload, dict) and payload.get("kind") == "Status":
            message = payload.get("message") or None
            if isinstance(payload.get("reason"), str):
                reason = payload["reason"]
            if isinstance(payload.get("details"), dict):
                details["status_details"] = payload["details"]

    if not isinstance(status_code, int):
        status_code = 0

    return ApiErrorInfo(
        status_code=status_code,
        reason=reason if isinstance(reason, str) else None,
        message=message,
        details=details or None,
    )
