#!/usr/bin/env python3
"""
Overall Score - weighted sum of the six dimension scores.

Formula: round2(sum(subscore_i * weight_i))
"""

import math
from typing import Optional

from core.scorer.dimensions import calculate_dimension_scores
from core.scorer.models import VehicleSnapshot, DimensionScores
from core.scorer.reference import ReferenceValues, DEFAULT_REFERENCE_VALUES
from core.scorer.weights import WeightSet, DEFAULT_WEIGHTS


def round2(value: float) -> float:
    """Round half-up to 2 decimal places on the scaled value."""
    return math.floor(value * 100 + 0.5) / 100


def weighted_sum(scores: DimensionScores, weights: WeightSet) -> float:
    return (
        scores.damage * weights.damage
        + scores.win_rate * weights.win_rate
        + scores.survival * weights.survival
        + scores.armor * weights.armor
        + scores.mobility * weights.mobility
        + scores.penetration * weights.penetration
    )


def calculate_overall_score(
    vehicle: VehicleSnapshot,
    weights: Optional[WeightSet] = None,
    reference: ReferenceValues = DEFAULT_REFERENCE_VALUES
) -> float:
    """
    Calculate the overall score of a vehicle.

    Args:
        vehicle: Snapshot of the vehicle's raw attributes.
        weights: Complete WeightSet; defaults to the documented defaults.
            Callers wanting the process-wide weights pass WeightStore.current().
        reference: Normalization ceilings.

    Returns:
        Overall score rounded to 2 decimals.
    """
    scores = calculate_dimension_scores(vehicle, reference)
    return round2(weighted_sum(scores, weights or DEFAULT_WEIGHTS))
