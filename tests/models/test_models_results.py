import unittest

from kcpbind.errors import AggregateError, ApiError
from kcpbind.models import APIBinding, BindingsResult, BindResult, Placement


class TestResults(unittest.TestCase):
    def test_bindings_result_without_errors(self) -> None:
        r = BindingsResult(bindings=[APIBinding(name="a")])
        self.assertIsNone(r.error)
        self.assertEqual(r.bindings[0].name, "a")

    def test_bindings_result_partial(self) -> None:
        r = BindingsResult(bindings=[APIBinding(name="a")], errors=[ApiError("boom")])
        self.assertIsInstance(r.error, AggregateError)
        self.assertEqual(str(r.error), "boom")
        self.assertEqual(len(r.bindings), 1)

    def test_bind_result_defaults(self) -> None:
        r = BindResult(placement=Placement(name="p"))
        self.assertEqual(r.bindings, [])
        self.assertEqual(r.api_exports, frozenset())
        self.assertFalse(r.polled)


if __name__ == "__main__":
    unittest.main()
