import unittest

from pydantic import ValidationError

from steelcut.config import Settings
from steelcut.core import CuttingPlanOptimizer


class TestSettings(unittest.TestCase):

    def test_defaults(self):
        settings = Settings.from_env({})

        self.assertEqual(settings.kerf, 3.0)
        self.assertEqual(settings.min_usable_remnant, 50.0)
        self.assertEqual(settings.standard_stock_length, 12000.0)

    def test_reads_prefixed_variables(self):
        settings = Settings.from_env({"STEELCUT_KERF": "2.5", "STEELCUT_API_PORT": "9000", "KERF": "99"})

        self.assertEqual(settings.kerf, 2.5)
        self.assertEqual(settings.api_port, 9000)

    def test_rejects_negative_kerf(self):
        with self.assertRaises(ValidationError):
            Settings.from_env({"STEELCUT_KERF": "-1"})

    def test_optimizer_from_settings(self):
        optimizer = CuttingPlanOptimizer.from_settings(Settings(kerf=4, min_usable_remnant=100))

        self.assertEqual(optimizer.kerf, 4)
        self.assertEqual(optimizer.min_usable_remnant, 100)


if __name__ == "__main__":
    unittest.main()
