import logging
import tempfile
import unittest
from pathlib import Path

import matplotlib
matplotlib.use("Agg")

from run import create_sample_data, main, run_demo
from steelcut.config import Settings
from steelcut.planning import plan_work_order


class TestRun(unittest.TestCase):

    def test_sample_data_is_fully_planned(self):
        inventory, demand = create_sample_data()
        result = plan_work_order(demand, inventory, Settings())

        self.assertEqual([g.profile_id for g in result.groups], ["HEA200", "IPE160"])
        self.assertTrue(result.groups[0].plan.is_complete)

    def test_demo_exports(self):
        with tempfile.TemporaryDirectory() as tmp:
            run_demo(Settings(), export_dir=tmp, visualization=True)

            self.assertTrue(list(Path(tmp).glob("plano_HEA200*.csv")))
            self.assertTrue(list(Path(tmp).glob("*.png")))

    def test_verbose_sets_debug_level(self):
        logging.getLogger().handlers.clear()
        self.assertEqual(main(["demo"]), 0)
        self.assertEqual(logging.getLogger().getEffectiveLevel(), logging.INFO)
        self.assertEqual(main(["--verbose", "demo"]), 0)
        self.assertEqual(logging.getLogger().getEffectiveLevel(), logging.DEBUG)
        logging.getLogger().setLevel(logging.WARNING)


if __name__ == "__main__":
    unittest.main()
