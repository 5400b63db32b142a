#!/usr/bin/env python3
"""
Scoring Models - Data structures consumed and produced by the scoring engine.
"""

from enum import Enum
from typing import Any, Dict, Optional
from dataclasses import dataclass, asdict


class VehicleType(str, Enum):
    LIGHT = "lightTank"
    MEDIUM = "mediumTank"
    HEAVY = "heavyTank"
    DESTROYER = "AT-SPG"
    SPG = "SPG"


class Nation(str, Enum):
    USSR = "ussr"
    GERMANY = "germany"
    USA = "usa"
    CHINA = "china"
    FRANCE = "france"
    UK = "uk"
    JAPAN = "japan"
    OTHER = "other"


@dataclass(frozen=True)
class VehicleSnapshot:
    """Immutable copy of the raw attributes the scoring engine reads."""
    id: int
    tier: int
    type: str
    health: float = 0.0
    armor_front: float = 0.0
    armor_side: float = 0.0
    armor_rear: float = 0.0
    gun_damage: float = 0.0
    gun_penetration: float = 0.0
    gun_rof: float = 0.0
    mobility_speed: float = 0.0
    mobility_power: float = 0.0
    score_overall: Optional[float] = None

    @classmethod
    def from_record(cls, record: Any) -> "VehicleSnapshot":
        """Build a snapshot from an ORM row or any object exposing the same attributes."""
        def num(name: str) -> float:
            value = getattr(record, name, None)
            return float(value) if value is not None else 0.0

        vehicle_type = getattr(record, "type", None)
        if isinstance(vehicle_type, Enum):
            vehicle_type = vehicle_type.value

        overall = getattr(record, "score_overall", None)
        return cls(
            id=record.id,
            tier=int(record.tier),
            type=vehicle_type,
            health=num("health"),
            armor_front=num("armor_front"),
            armor_side=num("armor_side"),
            armor_rear=num("armor_rear"),
            gun_damage=num("gun_damage"),
            gun_penetration=num("gun_penetration"),
            gun_rof=num("gun_rof"),
            mobility_speed=num("mobility_speed"),
            mobility_power=num("mobility_power"),
            score_overall=float(overall) if overall is not None else None,
        )


@dataclass(frozen=True)
class DimensionScores:
    """The six 0-100 sub-scores of a vehicle."""
    damage: float
    win_rate: float
    survival: float
    armor: float
    mobility: float
    penetration: float

    def to_dict(self) -> Dict[str, float]:
        data = asdict(self)
        data["winRate"] = data.pop("win_rate")
        return data


@dataclass(frozen=True)
class VehicleScores:
    """Derived values handed back to the caller for persistence."""
    overall: float
    tier: float
    type: float


@dataclass
class RecalculationSummary:
    """Outcome of a bulk recalculation sweep."""
    updated: int = 0
    errors: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {"updated": self.updated, "errors": self.errors}
