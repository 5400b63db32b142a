#!/usr/bin/env python3
"""
Reference ceilings used to normalize raw vehicle attributes into ratios.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ReferenceValues:
    """Practical maximum observed for each raw attribute."""
    max_damage: float = 750.0
    max_health: float = 2500.0
    max_armor: float = 300.0
    max_speed: float = 70.0
    max_penetration: float = 300.0
    max_power: float = 1000.0


DEFAULT_REFERENCE_VALUES = ReferenceValues()
