import unittest

from steelcut import PlanConflictError, compute_cutting_plan
from steelcut.exceptions import DuplicateRecordError, RecordNotFoundError
from steelcut.inventory import InMemoryInventory
from steelcut.models import ItemStatus, RemnantItem, RequiredPiece, StockItem


class TestInMemoryInventory(unittest.TestCase):

    def setUp(self):
        self.inventory = InMemoryInventory()
        self.inventory.add_stock(StockItem(id="S1", profile_id="HEA200", length=6000))
        self.inventory.add_stock(StockItem(id="S2", profile_id="HEA200", length=6000, status=ItemStatus.RESERVED))
        self.inventory.add_stock(StockItem(id="S3", profile_id="IPE160", length=6000))
        self.inventory.add_remnant(RemnantItem(id="R1", profile_id="HEA200", length=800))

    def plan(self, *pieces):
        stock, remnants = self.inventory.available_for("HEA200")
        return compute_cutting_plan("HEA200", stock, remnants, list(pieces), kerf=0)

    def test_available_for_filters_profile_and_status(self):
        stock, remnants = self.inventory.available_for("HEA200")

        self.assertEqual([s.id for s in stock], ["S1"])
        self.assertEqual([r.id for r in remnants], ["R1"])

    def test_apply_plan_consumes_and_creates_remnants(self):
        plan = self.plan(RequiredPiece(id="P1", profile_id="HEA200", length=4000))

        created = self.inventory.apply_plan(plan, work_order_id="OS-7")

        self.assertEqual(self.inventory.get("S1").status, ItemStatus.CONSUMED)
        self.assertEqual(self.inventory.get("R1").status, ItemStatus.AVAILABLE)
        self.assertEqual(len(created), 1)
        self.assertEqual(created[0].length, 2000)
        self.assertEqual(created[0].origin_source_id, "S1")
        self.assertEqual(created[0].origin_work_order_id, "OS-7")
        self.assertIn(created[0].id, self.inventory)

    def test_stale_plan_conflicts_without_changes(self):
        first = self.plan(RequiredPiece(id="P1", profile_id="HEA200", length=4000))
        second = self.plan(
            RequiredPiece(id="P2", profile_id="HEA200", length=700),
            RequiredPiece(id="P3", profile_id="HEA200", length=3000),
        )
        self.inventory.apply_plan(first)
        size = len(self.inventory)

        with self.assertRaises(PlanConflictError) as ctx:
            self.inventory.apply_plan(second)

        self.assertEqual(ctx.exception.source_ids, ["S1"])
        self.assertEqual(self.inventory.get("R1").status, ItemStatus.AVAILABLE)
        self.assertEqual(len(self.inventory), size)

    def test_unknown_and_duplicate_ids(self):
        with self.assertRaises(RecordNotFoundError):
            self.inventory.get("nope")
        with self.assertRaises(DuplicateRecordError):
            self.inventory.add_remnant(RemnantItem(id="S1", profile_id="HEA200", length=100))


if __name__ == "__main__":
    unittest.main()
