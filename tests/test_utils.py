import json
import tempfile
import unittest
from pathlib import Path

import matplotlib
matplotlib.use("Agg")

from steelcut import compute_cutting_plan
from steelcut.models import RemnantItem, RequiredPiece, StockItem
from steelcut.utils import CuttingPlanReporter, CuttingPlanVisualizer, create_visualization, export_plan


def sample_plan():
    return compute_cutting_plan(
        "HEA200",
        [StockItem(id="S1", profile_id="HEA200", length=2000)],
        [RemnantItem(id="R1", profile_id="HEA200", length=300)],
        [
            RequiredPiece(id="P1", profile_id="HEA200", length=1000, label="Viga"),
            RequiredPiece(id="P2", profile_id="HEA200", length=500, quantity=2),
            RequiredPiece(id="P3", profile_id="HEA200", length=280),
        ],
        kerf=5,
    )


class TestReporter(unittest.TestCase):

    def setUp(self):
        self.plan = sample_plan()
        self.reporter = CuttingPlanReporter(self.plan)

    def test_text_report(self):
        text = self.reporter.generate_text_report()

        self.assertIn("PERFIL HEA200", text)
        self.assertIn("Viga: 1000mm (pos: 0mm)", text)
        self.assertIn("SEM ESTOQUE", text)

    def test_frames(self):
        self.assertEqual(len(self.reporter.cuts_frame()), 3)
        self.assertEqual(list(self.reporter.sources_frame()["Origem"]), ["S1", "R1"])
        self.assertEqual(len(self.reporter.unassigned_frame()), 1)

    def test_export_plan(self):
        with tempfile.TemporaryDirectory() as tmp:
            base = export_plan(self.plan, tmp)

            for suffix in ("_cortes.csv", "_origens.csv", "_retalhos.csv", "_pendencias.csv"):
                self.assertTrue(Path(f"{base}{suffix}").exists())
            data = json.loads(Path(f"{base}.json").read_text(encoding="utf-8"))
            self.assertEqual(data["profile_group_id"], "HEA200")
            self.assertIn("<table", Path(f"{base}.html").read_text(encoding="utf-8"))


class TestVisualizer(unittest.TestCase):

    def test_create_visualization(self):
        with tempfile.TemporaryDirectory() as tmp:
            create_visualization(sample_plan(), tmp)

            self.assertEqual(len(list(Path(tmp).glob("*.png"))), 2)

    def test_empty_plan_has_no_bars(self):
        plan = compute_cutting_plan("HEA200", [], [], [])

        self.assertFalse(CuttingPlanVisualizer(plan).plot_bars(show=False))


if __name__ == "__main__":
    unittest.main()
