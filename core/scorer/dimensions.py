#!/usr/bin/env python3
"""
Per-Dimension Scorers - map raw vehicle attributes to 0-100 sub-scores.

Every scorer is a pure function of a VehicleSnapshot and the reference
ceilings. Ratios may exceed 1 when an attribute is above its ceiling;
only the final sub-score is clamped to [0, 100].
"""

import logging

from core.scorer.models import VehicleSnapshot, VehicleType, DimensionScores
from core.scorer.reference import ReferenceValues, DEFAULT_REFERENCE_VALUES

logger = logging.getLogger(__name__)

# Reference power-to-weight (hp per tonne) for a full mobility bonus
POWER_TO_WEIGHT_REFERENCE = 30.0

# Simulated win-rate adjustment by vehicle category
TYPE_MODIFIERS = {
    VehicleType.HEAVY.value: 1.1,
    VehicleType.MEDIUM.value: 1.05,
    VehicleType.LIGHT.value: 0.95,
    VehicleType.DESTROYER.value: 0.9,
}
DEFAULT_TYPE_MODIFIER = 1.0


def _clamp(value: float) -> float:
    return max(0.0, min(100.0, value))


def damage_score(
    vehicle: VehicleSnapshot,
    reference: ReferenceValues = DEFAULT_REFERENCE_VALUES
) -> float:
    """
    Damage per shot and damage per minute.

    Formula: 100 * (0.6 * dmg/maxDamage + 0.4 * dmg*rof / (maxDamage*10))
    """
    damage_ratio = vehicle.gun_damage / reference.max_damage
    dpm_ratio = (vehicle.gun_damage * vehicle.gun_rof) / (reference.max_damage * 10)
    return _clamp((damage_ratio * 0.6 + dpm_ratio * 0.4) * 100)


def survival_score(
    vehicle: VehicleSnapshot,
    reference: ReferenceValues = DEFAULT_REFERENCE_VALUES
) -> float:
    """Hit points (70%) and mean armor across the three zones (30%)."""
    health_ratio = vehicle.health / reference.max_health
    avg_armor = (vehicle.armor_front + vehicle.armor_side + vehicle.armor_rear) / 3
    avg_armor_ratio = avg_armor / reference.max_armor
    return _clamp((health_ratio * 0.7 + avg_armor_ratio * 0.3) * 100)


def armor_score(
    vehicle: VehicleSnapshot,
    reference: ReferenceValues = DEFAULT_REFERENCE_VALUES
) -> float:
    """Armor weighted by zone: front 50%, side 30%, rear 20%."""
    front_ratio = vehicle.armor_front / reference.max_armor
    side_ratio = vehicle.armor_side / reference.max_armor
    rear_ratio = vehicle.armor_rear / reference.max_armor

    weighted_armor = front_ratio * 0.5 + side_ratio * 0.3 + rear_ratio * 0.2
    return _clamp(weighted_armor * 100)


def _power_to_weight_score(vehicle: VehicleSnapshot) -> float:
    # Hit points stand in for mass: health / 1000 ~ tonnes
    if vehicle.health <= 0:
        return 1.0 if vehicle.mobility_power > 0 else 0.0
    power_to_weight = vehicle.mobility_power / (vehicle.health / 1000)
    return max(0.0, min(1.0, power_to_weight / POWER_TO_WEIGHT_REFERENCE))


def mobility_score(
    vehicle: VehicleSnapshot,
    reference: ReferenceValues = DEFAULT_REFERENCE_VALUES
) -> float:
    """Top speed (40%), engine power (30%) and power-to-weight (30%)."""
    speed_ratio = vehicle.mobility_speed / reference.max_speed
    power_ratio = vehicle.mobility_power / reference.max_power
    ptw_score = _power_to_weight_score(vehicle)
    return _clamp((speed_ratio * 0.4 + power_ratio * 0.3 + ptw_score * 0.3) * 100)


def penetration_score(
    vehicle: VehicleSnapshot,
    reference: ReferenceValues = DEFAULT_REFERENCE_VALUES
) -> float:
    return _clamp((vehicle.gun_penetration / reference.max_penetration) * 100)


def win_rate_score(
    vehicle: VehicleSnapshot,
    reference: ReferenceValues = DEFAULT_REFERENCE_VALUES
) -> float:
    """
    Simulated win-rate score.

    This is NOT real battle data: it is the mean of the damage, survival
    and mobility scores scaled by a per-category modifier (heavy 1.1,
    medium 1.05, light 0.95, destroyer 0.9, anything else 1.0).
    """
    balance = (
        damage_score(vehicle, reference)
        + survival_score(vehicle, reference)
        + mobility_score(vehicle, reference)
    ) / 3
    modifier = TYPE_MODIFIERS.get(vehicle.type, DEFAULT_TYPE_MODIFIER)
    return _clamp(balance * modifier)


def calculate_dimension_scores(
    vehicle: VehicleSnapshot,
    reference: ReferenceValues = DEFAULT_REFERENCE_VALUES
) -> DimensionScores:
    """Compute all six sub-scores of a vehicle."""
    return DimensionScores(
        damage=damage_score(vehicle, reference),
        win_rate=win_rate_score(vehicle, reference),
        survival=survival_score(vehicle, reference),
        armor=armor_score(vehicle, reference),
        mobility=mobility_score(vehicle, reference),
        penetration=penetration_score(vehicle, reference),
    )
