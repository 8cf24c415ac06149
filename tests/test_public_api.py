import unittest

import kcpbind


class TestPublicApi(unittest.TestCase):
    def test_top_level_exports_exist(self) -> None:
        self.assertTrue(hasattr(kcpbind, "ComputeBinder"))
        self.assertTrue(hasattr(kcpbind, "BindComputeOptions"))
        self.assertTrue(hasattr(kcpbind, "KubeconfigInfo"))

        self.assertTrue(hasattr(kcpbind, "APIBinding"))
        self.assertTrue(hasattr(kcpbind, "Placement"))
        self.assertTrue(hasattr(kcpbind, "BindResult"))

        self.assertTrue(hasattr(kcpbind, "KcpBindError"))
        self.assertTrue(hasattr(kcpbind, "NotReadyError"))

    def test___all___is_defined(self) -> None:
        self.assertTrue(hasattr(kcpbind, "__all__"))
        self.assertIn("ComputeBinder", kcpbind.__all__)
        self.assertIn("KcpBindError", kcpbind.__all__)
        for name in kcpbind.__all__:
            self.assertTrue(hasattr(kcpbind, name), name)


if __name__ == "__main__":
    unittest.main()
