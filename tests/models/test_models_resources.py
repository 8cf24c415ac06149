import unittest

from kcpbind.models import (
    SYNC_TARGETS_RESOURCE,
    APIBinding,
    APIBindingPhase,
    Condition,
    Placement,
    WorkspaceExportReference,
)


class TestAPIBinding(unittest.TestCase):
    def test_defaults(self) -> None:
        b = APIBinding(name="kubernetes-abc")
        self.assertIsNone(b.reference)
        self.assertIsNone(b.phase)
        self.assertFalse(b.is_bound)

    def test_only_bound_is_bound(self) -> None:
        for phase in APIBindingPhase:
            b = APIBinding(name="x", phase=phase)
            self.assertEqual(b.is_bound, phase is APIBindingPhase.BOUND)

    def test_qualified_name(self) -> None:
        ref = WorkspaceExportReference(path="root:compute", export_name="kubernetes")
        self.assertEqual(ref.qualified_name, "root:compute:kubernetes")


class TestPlacement(unittest.TestCase):
    def test_defaults(self) -> None:
        p = Placement(name="placement-x")
        self.assertEqual(p.location_resource, SYNC_TARGETS_RESOURCE)
        self.assertTrue(p.namespace_selector.is_everything)
        self.assertFalse(p.is_ready)

    def test_ready_condition(self) -> None:
        p = Placement(
            name="p",
            conditions=[Condition(type="Scheduled", status="True"), Condition(type="Ready", status="False")],
        )
        self.assertFalse(p.is_ready)
        self.assertEqual(p.get_condition("Ready").status, "False")

        p.conditions = [Condition(type="Ready", status="True")]
        self.assertTrue(p.is_ready)
        self.assertIsNone(p.get_condition("Missing"))


if __name__ == "__main__":
    unittest.main()
