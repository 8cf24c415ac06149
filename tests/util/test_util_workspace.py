import unittest

from kcpbind.util.workspace import WorkspacePath, is_valid_workspace, split_export


class TestWorkspacePath(unittest.TestCase):
    def test_valid_paths(self) -> None:
        for value in ("root", "root:org", "root:org-1:team2", "a:b:c"):
            self.assertTrue(is_valid_workspace(value), value)

    def test_invalid_paths(self) -> None:
        for value in ("", "Root", "root:", ":root", "root::a", "root:-a", "root:a-", "root/a"):
            self.assertFalse(is_valid_workspace(value), value)

    def test_validated_raises(self) -> None:
        with self.assertRaises(ValueError):
            WorkspacePath.validated("Bad")
        self.assertEqual(str(WorkspacePath.validated("root:a")), "root:a")

    def test_split_and_join(self) -> None:
        parent, name = WorkspacePath("root:org:ws").split()
        self.assertEqual(parent, WorkspacePath("root:org"))
        self.assertEqual(name, "ws")
        self.assertEqual(parent.join(name), WorkspacePath("root:org:ws"))

        parent, name = WorkspacePath("root").split()
        self.assertEqual(parent.value, "")
        self.assertEqual(name, "root")
        self.assertEqual(parent.join("root"), WorkspacePath("root"))

    def test_path(self) -> None:
        self.assertEqual(WorkspacePath("root:a").path(), "/clusters/root:a")


class TestSplitExport(unittest.TestCase):
    def test_qualified(self) -> None:
        ws, name = split_export("root:compute:kubernetes")
        self.assertEqual(ws, WorkspacePath("root:compute"))
        self.assertEqual(name, "kubernetes")

    def test_unqualified_raises(self) -> None:
        with self.assertRaises(ValueError):
            split_export("kubernetes")
        with self.assertRaises(ValueError):
            split_export("root:")


if __name__ == "__main__":
    unittest.main()
