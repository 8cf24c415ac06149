import io
import threading
import unittest
from unittest.mock import MagicMock, patch

from kcpbind.auth import KubeconfigInfo
from kcpbind.binder import ComputeBinder
from kcpbind.errors import (
    AggregateError,
    AlreadyExistsError,
    ApiError,
    CancelledError,
    NotReadyError,
    UnsupportedExportsError,
)
from kcpbind.models import (
    APIBinding,
    APIBindingPhase,
    Condition,
    Placement,
    SupportedExport,
    SyncTarget,
)
from kcpbind.options import BindComputeOptions
from kcpbind.util.hashing import hash_name


class FakeCluster:
    """In-memory stand-in for one kcp workspace plus its controllers."""

    def __init__(self, sync_targets=None) -> None:
        self.calls = []
        self.sync_targets = list(sync_targets or [])
        self.bindings = {}
        self.placements = {}
        self.fail_create_binding = {}
        # Simulates the external controllers: everything becomes ready after
        # this many status reads.
        self.ready_after_reads = 0
        self._reads = 0

    def list_sync_targets(self):
        self.calls.append(("list_sync_targets",))
        return list(self.sync_targets)

    def list_api_bindings(self):
        self.calls.append(("list_api_bindings",))
        return list(self.bindings.values())

    def create_api_binding(self, binding):
        self.calls.append(("create_api_binding", binding.name))
        exc = self.fail_create_binding.get(binding.name)
        if exc is not None:
            raise exc
        if binding.name in self.bindings:
            raise AlreadyExistsError("exists")
        self.bindings[binding.name] = binding
        return APIBinding(name=binding.name, reference=binding.reference)

    def create_placement(self, placement):
        self.calls.append(("create_placement", placement.name))
        if placement.name in self.placements:
            raise AlreadyExistsError("exists")
        self.placements[placement.name] = placement
        return Placement(name=placement.name, location_workspace=placement.location_workspace)

    def get_placement(self, name, *, retry=True):
        self.calls.append(("get_placement", name))
        self._reads += 1
        ready = self._reads > self.ready_after_reads
        return Placement(name=name, conditions=[Condition("Ready", "True" if ready else "False")])

    def get_api_binding(self, name, *, retry=True):
        self.calls.append(("get_api_binding", name))
        ready = self._reads > self.ready_after_reads
        binding = self.bindings[name]
        return APIBinding(
            name=name,
            reference=binding.reference,
            phase=APIBindingPhase.BOUND if ready else APIBindingPhase.BINDING,
        )

    def call_names(self):
        return [c[0] for c in self.calls]


def _no_sleep(seconds: float) -> None:
    return None


class TestComputeBinder(unittest.TestCase):
    def _binder(self, workspace, location):
        out = io.StringIO()
        return ComputeBinder.from_controllers(workspace, location, out=out), out

    def test_end_to_end_default_exports(self) -> None:
        location = FakeCluster(
            sync_targets=[
                SyncTarget(name="cluster-1", supported_exports=[SupportedExport("kubernetes")]),
            ]
        )
        workspace = FakeCluster()
        workspace.ready_after_reads = 1
        binder, out = self._binder(workspace, location)

        options = BindComputeOptions.complete(["root:locations"])
        result = binder.run(options, sleep=_no_sleep)

        expected_name = "kubernetes-" + hash_name("/clusters/root:locations")
        self.assertEqual(list(workspace.bindings), [expected_name])
        ref = workspace.bindings[expected_name].reference
        self.assertEqual((ref.path, ref.export_name), ("root:locations", "kubernetes"))

        placement = workspace.placements[options.placement_name]
        self.assertTrue(placement.namespace_selector.is_everything)
        self.assertEqual(len(placement.location_selectors), 1)
        self.assertTrue(placement.location_selectors[0].is_everything)
        self.assertEqual(placement.location_workspace, "root:locations")

        self.assertTrue(result.polled)
        self.assertEqual(result.api_exports, frozenset({"root:locations:kubernetes"}))
        self.assertEqual(
            out.getvalue(),
            f"apibinding {expected_name} for apiexport root:locations:kubernetes created.\n"
            f"placement {options.placement_name} created.\n",
        )
        self.assertEqual(location.call_names(), ["list_sync_targets"])

    def test_second_run_is_idempotent(self) -> None:
        location = FakeCluster(
            sync_targets=[
                SyncTarget(
                    name="c",
                    supported_exports=[SupportedExport("kubernetes", path="root:compute")],
                )
            ]
        )
        workspace = FakeCluster()
        binder, _ = self._binder(workspace, location)

        first = binder.run(BindComputeOptions.complete(["root:locations"]), sleep=_no_sleep)
        second = binder.run(BindComputeOptions.complete(["root:locations"]), sleep=_no_sleep)

        self.assertEqual(first.placement.name, second.placement.name)
        self.assertEqual(len(workspace.placements), 1)
        self.assertEqual(len(workspace.bindings), 1)
        self.assertEqual(second.bindings, [])
        self.assertEqual(workspace.call_names().count("create_api_binding"), 1)
        self.assertEqual(workspace.call_names().count("create_placement"), 2)

    def test_unsupported_exports_create_nothing(self) -> None:
        location = FakeCluster(sync_targets=[])
        workspace = FakeCluster()
        binder, _ = self._binder(workspace, location)

        with self.assertRaises(UnsupportedExportsError):
            binder.run(BindComputeOptions.complete(["root:locations"], api_exports=["root:a:x"]))

        self.assertEqual(workspace.calls, [])

    def test_binding_failure_stops_before_placement(self) -> None:
        location = FakeCluster(
            sync_targets=[
                SyncTarget(
                    name="c",
                    supported_exports=[SupportedExport("x", path="root:a"), SupportedExport("y", path="root:b")],
                )
            ]
        )
        workspace = FakeCluster()
        failing = "x-" + hash_name("/clusters/root:a")
        workspace.fail_create_binding[failing] = ApiError("boom")
        binder, _ = self._binder(workspace, location)

        options = BindComputeOptions.complete(["root:locations"], api_exports=["root:a:x", "root:b:y"])
        with self.assertRaises(AggregateError):
            binder.run(options)

        self.assertNotIn("create_placement", workspace.call_names())
        self.assertEqual(len(workspace.bindings), 1)

    def test_timeout(self) -> None:
        location = FakeCluster(sync_targets=[])
        workspace = FakeCluster()
        workspace.ready_after_reads = 10_000
        binder, _ = self._binder(workspace, location)

        options = BindComputeOptions.complete(["root:locations"], name="p1", timeout=0.01)
        with self.assertRaises(NotReadyError) as ctx:
            binder.run(options)

        self.assertIn("p1", str(ctx.exception))


    def test_cancel_before_run_issues_no_calls(self) -> None:
        location = FakeCluster(
            sync_targets=[SyncTarget(name="c", supported_exports=[SupportedExport("kubernetes")])]
        )
        workspace = FakeCluster()
        binder, out = self._binder(workspace, location)
        cancel = threading.Event()
        cancel.set()

        with self.assertRaises(CancelledError):
            binder.run(BindComputeOptions.complete(["root:locations"]), cancel=cancel)

        self.assertEqual(location.calls, [])
        self.assertEqual(workspace.calls, [])
        self.assertEqual(out.getvalue(), "")

    def test_cancel_during_bindings_skips_remaining_creates(self) -> None:
        cancel = threading.Event()

        class CancellingCluster(FakeCluster):
            def create_api_binding(self, binding):
                created = super().create_api_binding(binding)
                cancel.set()
                return created

        location = FakeCluster(
            sync_targets=[
                SyncTarget(
                    name="c",
                    supported_exports=[SupportedExport("x", path="root:a"), SupportedExport("y", path="root:b")],
                )
            ]
        )
        workspace = CancellingCluster()
        binder, _ = self._binder(workspace, location)

        options = BindComputeOptions.complete(["root:locations"], api_exports=["root:a:x", "root:b:y"])
        with self.assertRaises(CancelledError):
            binder.run(options, cancel=cancel)

        self.assertEqual(workspace.call_names(), ["list_api_bindings", "create_api_binding"])
        self.assertNotIn("create_placement", workspace.call_names())


class ClosableCluster(FakeCluster):
    def __init__(self, sync_targets=None) -> None:
        super().__init__(sync_targets)
        self.closed = False

    def close(self) -> None:
        self.closed = True


class TestComputeBinderConnections(unittest.TestCase):
    def test_controllers_get_cancel_and_are_closed(self) -> None:
        workspace = ClosableCluster()
        location = ClosableCluster(
            sync_targets=[SyncTarget(name="c", supported_exports=[SupportedExport("kubernetes")])]
        )
        cancel = threading.Event()
        with patch("kcpbind.binder.ClientFactory") as factory_cls, patch(
            "kcpbind.binder.KcpController", side_effect=[workspace, location]
        ) as controller_cls:
            binder = ComputeBinder(KubeconfigInfo(), out=io.StringIO())
            binder.run(BindComputeOptions.complete(["root:locations"]), cancel=cancel, sleep=_no_sleep)

        factory = factory_cls.return_value
        factory.location_client.assert_called_once()
        self.assertEqual(str(factory.location_client.call_args.args[0]), "root:locations")
        for call in controller_cls.call_args_list:
            self.assertIs(call.kwargs["cancel"], cancel)
        self.assertTrue(workspace.closed)
        self.assertTrue(location.closed)

    def test_controllers_are_closed_on_failure(self) -> None:
        workspace = ClosableCluster()
        location = ClosableCluster(sync_targets=[])
        with patch("kcpbind.binder.ClientFactory", MagicMock()), patch(
            "kcpbind.binder.KcpController", side_effect=[workspace, location]
        ):
            binder = ComputeBinder(KubeconfigInfo(), out=io.StringIO())
            with self.assertRaises(UnsupportedExportsError):
                binder.run(BindComputeOptions.complete(["root:locations"], api_exports=["root:a:x"]))

        self.assertTrue(workspace.closed)
        self.assertTrue(location.closed)


if __name__ == "__main__":
    unittest.main()
