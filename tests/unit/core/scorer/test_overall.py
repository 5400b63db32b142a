#!/usr/bin/env python3
"""
Unit tests for the overall score aggregator.
"""

import unittest

from core.scorer.overall import calculate_overall_score, round2, weighted_sum
from core.scorer.models import DimensionScores
from core.scorer.weights import DEFAULT_WEIGHTS, WeightSet
from tests.fixtures.vehicle_fixtures import snapshot, REGRESSION_OVERALL


class TestOverallScore(unittest.TestCase):

    def test_regression_vehicle(self):
        self.assertEqual(calculate_overall_score(snapshot(), DEFAULT_WEIGHTS), REGRESSION_OVERALL)

    def test_defaults_when_no_weights_given(self):
        self.assertEqual(calculate_overall_score(snapshot()), REGRESSION_OVERALL)

    def test_deterministic(self):
        vehicle = snapshot()
        results = {calculate_overall_score(vehicle) for _ in range(20)}
        self.assertEqual(len(results), 1)

    def test_single_dimension_weight(self):
        penetration_only = WeightSet(
            damage=0.0, win_rate=0.0, survival=0.0, armor=0.0, mobility=0.0, penetration=1.0
        )
        self.assertEqual(calculate_overall_score(snapshot(), penetration_only), 66.67)

    def test_within_bounds(self):
        for overrides in ({}, {"gun_damage": 5000, "gun_rof": 30}, {"health": 0, "gun_damage": 0}):
            score = calculate_overall_score(snapshot(**overrides))
            self.assertGreaterEqual(score, 0.0)
            self.assertLessEqual(score, 100.0)

    def test_weighted_sum(self):
        scores = DimensionScores(
            damage=100, win_rate=50, survival=0, armor=0, mobility=0, penetration=0
        )
        self.assertAlmostEqual(weighted_sum(scores, DEFAULT_WEIGHTS), 35.0)


class TestRound2(unittest.TestCase):

    def test_half_up(self):
        self.assertEqual(round2(1.005 + 1e-9), 1.01)
        self.assertEqual(round2(2.675 + 1e-9), 2.68)
        self.assertEqual(round2(65.1725), 65.17)

    def test_truncates_below_half(self):
        self.assertEqual(round2(12.3449), 12.34)

    def test_negative_values(self):
        self.assertEqual(round2(-1.236), -1.24)


if __name__ == "__main__":
    unittest.main()
