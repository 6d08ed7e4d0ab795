import unittest

from fastapi.testclient import TestClient

from main import app

REQUEST = {
    "profile_group_id": "HEA200",
    "stock": [{"id": "S1", "profile_id": "HEA200", "length": 2000}],
    "remnants": [],
    "demand": [
        {"id": "P1", "profile_id": "HEA200", "length": 1000},
        {"id": "P2", "profile_id": "HEA200", "length": 500, "quantity": 2},
    ],
    "kerf": 5,
    "min_usable_remnant": 50,
}


class TestApi(unittest.TestCase):

    def setUp(self):
        self.client = TestClient(app)

    def test_health(self):
        response = self.client.get("/health")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "healthy")

    def test_optimize(self):
        response = self.client.post("/optimize", json=REQUEST)

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(len(body["assignments"]), 2)
        self.assertEqual(body["unassignable"][0]["piece_id"], "P2")
        self.assertEqual(body["total_waste_length"], 10)

    def test_optimize_invalid_input(self):
        response = self.client.post("/optimize", json=dict(REQUEST, kerf=-1))

        self.assertEqual(response.status_code, 422)
        self.assertIn("Kerf", response.json()["detail"])

    def test_batch_reports_failures(self):
        bad = dict(REQUEST, profile_group_id="IPE160")
        response = self.client.post("/optimize/batch", json=[REQUEST, bad])

        body = response.json()
        self.assertEqual(response.status_code, 200)
        self.assertEqual(body["successful"], 1)
        self.assertEqual(body["failed"], 1)
        self.assertEqual(body["results"][1]["profile_group_id"], "IPE160")

    def test_purchase_suggest(self):
        response = self.client.post("/purchase/suggest", json={
            "profile_id": "HEA200",
            "unassignable": [{"piece_id": "P2", "instance": 2, "length": 500}],
            "standard_length": 6000,
        })

        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.json()["bars"]), 1)

    def test_purchase_suggest_rejects_zero_length(self):
        response = self.client.post("/purchase/suggest", json={
            "profile_id": "HEA200",
            "unassignable": [{"piece_id": "P2", "instance": 2, "length": 500}],
            "standard_length": 0,
        })

        self.assertEqual(response.status_code, 422)
        self.assertIn("Barra comercial", response.json()["detail"])

    def test_report_txt(self):
        plan = self.client.post("/optimize", json=REQUEST).json()
        response = self.client.post("/report/generate?format=txt", json=plan)

        self.assertEqual(response.status_code, 200)
        self.assertIn("HEA200", response.json()["results"]["txt"])

    def test_report_unknown_format(self):
        plan = self.client.post("/optimize", json=REQUEST).json()
        response = self.client.post("/report/generate?format=pdf", json=plan)

        self.assertEqual(response.status_code, 400)

    def test_example_is_valid_request(self):
        example = self.client.get("/examples").json()
        response = self.client.post("/optimize", json=example)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["unassignable"], [])


if __name__ == "__main__":
    unittest.main()
