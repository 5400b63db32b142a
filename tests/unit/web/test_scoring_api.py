#!/usr/bin/env python3
"""
Unit tests for the scoring endpoints (/api/scoring).
"""

import json
import unittest

import pytest

from tests.fixtures.vehicle_fixtures import vehicle_data, REGRESSION_OVERALL
from tests.unit.web.api_helpers import ApiTestContext


@pytest.mark.db
class TestWeightsEndpoints(unittest.TestCase):

    def setUp(self):
        self.ctx = ApiTestContext()
        self.client = self.ctx.client

    def tearDown(self):
        self.ctx.close()

    def test_get_default_weights(self):
        response = self.client.get("/api/scoring/weights")

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["data"], {
            "damage": 0.25,
            "winRate": 0.20,
            "survival": 0.15,
            "armor": 0.15,
            "mobility": 0.15,
            "penetration": 0.10,
        })

    def test_partial_update_renormalizes(self):
        response = self.client.put("/api/scoring/weights", json={"weights": {"damage": 0.4}})

        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertAlmostEqual(sum(data.values()), 1.0)
        self.assertAlmostEqual(data["damage"], 0.4 / 1.15)
        self.assertAlmostEqual(data["winRate"], 0.20 / 1.15)
        self.assertAlmostEqual(self.ctx.weight_store.current().damage, 0.4 / 1.15)

    def test_update_with_unknown_key(self):
        response = self.client.put("/api/scoring/weights", json={"weights": {"speed": 0.5}})

        self.assertEqual(response.status_code, 400)
        body = response.json()
        self.assertFalse(body["success"])
        self.assertEqual(body["type"], "InvalidWeightKey")
        self.assertEqual(self.ctx.weight_store.current().damage, 0.25)

    def test_update_with_out_of_range_value(self):
        response = self.client.put("/api/scoring/weights", json={"weights": {"damage": 1.5}})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["type"], "InvalidWeightValue")

    def test_update_with_non_numeric_value(self):
        response = self.client.put("/api/scoring/weights", json={"weights": {"armor": "heavy"}})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["type"], "InvalidWeightValue")

    def test_update_without_weights_body(self):
        response = self.client.put("/api/scoring/weights", json={})

        self.assertEqual(response.status_code, 422)


@pytest.mark.db
class TestRecalculationEndpoints(unittest.TestCase):

    def setUp(self):
        self.ctx = ApiTestContext()
        self.client = self.ctx.client
        self.ctx.seed(vehicle_data(1), vehicle_data(2, tier=9, gun_damage=300))

    def tearDown(self):
        self.ctx.close()

    def test_recalculate_all(self):
        self.ctx.cache.set("ranking:overall_10_all_all", [])

        response = self.client.post("/api/scoring/recalculate")

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["data"], {"updated": 2, "errors": 0})
        self.assertIn("2 vehicles updated", body["message"])
        self.assertNotIn("ranking:overall_10_all_all", self.ctx.cache.store)

    def test_recalculate_all_with_custom_weights_keeps_current(self):
        response = self.client.post("/api/scoring/recalculate", json={"weights": {"damage": 1.0}})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.ctx.weight_store.current().damage, 0.25)

    def test_recalculate_all_with_invalid_weights(self):
        response = self.client.post("/api/scoring/recalculate", json={"weights": {"luck": 0.1}})

        self.assertEqual(response.status_code, 400)

    def test_recalculate_one_vehicle(self):
        response = self.client.post("/api/scoring/tank/1")

        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertEqual(data["id"], 1)
        self.assertEqual(data["score_overall"], REGRESSION_OVERALL)
        self.assertIsNotNone(data["score_tier"])
        self.assertIsNotNone(data["score_type"])

    def test_recalculate_unknown_vehicle(self):
        response = self.client.post("/api/scoring/tank/999")

        self.assertEqual(response.status_code, 404)
        body = response.json()
        self.assertFalse(body["success"])
        self.assertEqual(body["type"], "VehicleNotFound")


@pytest.mark.db
class TestReportAndSimulation(unittest.TestCase):

    def setUp(self):
        self.ctx = ApiTestContext()
        self.client = self.ctx.client
        self.ctx.seed(vehicle_data(1), vehicle_data(2), vehicle_data(3))
        self.ctx.set_score(1, 92.0)
        self.ctx.set_score(2, 65.0)

    def tearDown(self):
        self.ctx.close()

    def test_report(self):
        response = self.client.get("/api/scoring/report")

        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertEqual(data["totalVehicles"], 3)
        self.assertEqual([v["id"] for v in data["topPerformers"]], [1, 2])
        self.assertEqual(data["scoreDistribution"]["90-100"], 1)
        self.assertEqual(data["scoreDistribution"]["60-69"], 1)
        self.assertEqual(data["scoreDistribution"]["0-59"], 1)

    def test_simulate_with_current_weights(self):
        response = self.client.get("/api/scoring/simulate/1")

        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertEqual(data["tankId"], 1)
        self.assertEqual(data["tankName"], "Vehicle 1")
        self.assertEqual(data["currentScore"], REGRESSION_OVERALL)
        self.assertEqual(data["difference"], 0)

    def test_simulate_with_hypothetical_weights(self):
        weights = json.dumps({"damage": 0.5})
        response = self.client.get("/api/scoring/simulate/1", params={"weights": weights})

        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertEqual(data["weights"]["damage"], 0.5)
        self.assertNotEqual(data["simulatedScore"], data["currentScore"])
        # Nothing persisted, nothing changed
        self.assertEqual(self.ctx.weight_store.current().damage, 0.25)

    def test_simulate_with_malformed_weights(self):
        response = self.client.get("/api/scoring/simulate/1", params={"weights": "{damage"})

        self.assertEqual(response.status_code, 400)
        self.assertIn("Invalid weights format", response.json()["error"])

    def test_simulate_with_non_object_weights(self):
        response = self.client.get("/api/scoring/simulate/1", params={"weights": "[0.5]"})

        self.assertEqual(response.status_code, 400)

    def test_simulate_unknown_vehicle(self):
        response = self.client.get("/api/scoring/simulate/404")

        self.assertEqual(response.status_code, 404)


if __name__ == '__main__':
    unittest.main()
