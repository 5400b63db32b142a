#!/usr/bin/env python3
"""
Scoring Weights - the six-weight configuration used by the overall score.

A WeightSet is immutable. The process-wide "current" weights live in a
WeightStore, which replaces the whole set under a lock so a concurrent
reader always observes either the old or the new set in full.
"""

import math
import logging
import threading
from dataclasses import dataclass, replace
from numbers import Real
from typing import Any, Dict, Mapping, Optional

from core.exceptions import InvalidWeightKey, InvalidWeightValue

logger = logging.getLogger(__name__)

# Wire name -> attribute name
WEIGHT_KEYS: Dict[str, str] = {
    "damage": "damage",
    "winRate": "win_rate",
    "survival": "survival",
    "armor": "armor",
    "mobility": "mobility",
    "penetration": "penetration",
}

SUM_TOLERANCE = 1e-9


@dataclass(frozen=True)
class WeightSet:
    """Weights for each dimension in the overall score calculation."""
    damage: float = 0.25
    win_rate: float = 0.20
    survival: float = 0.15
    armor: float = 0.15
    mobility: float = 0.15
    penetration: float = 0.10

    @property
    def total(self) -> float:
        return sum(self.to_dict().values())

    def to_dict(self) -> Dict[str, float]:
        return {key: getattr(self, attr) for key, attr in WEIGHT_KEYS.items()}

    @classmethod
    def from_mapping(cls, weights: Mapping[str, Any]) -> "WeightSet":
        """Build a complete WeightSet; every one of the six keys must be present."""
        validate_weight_mapping(weights)
        missing = [key for key in WEIGHT_KEYS if key not in weights]
        if missing:
            raise InvalidWeightKey(f"Missing weight keys: {', '.join(missing)}")
        return cls(**{WEIGHT_KEYS[key]: float(weights[key]) for key in WEIGHT_KEYS})

    def merged(self, partial: Mapping[str, Any]) -> "WeightSet":
        """Return a copy with the given (validated) keys replaced. No renormalization."""
        validate_weight_mapping(partial)
        return replace(self, **{WEIGHT_KEYS[key]: float(value) for key, value in partial.items()})

    def normalized(self) -> "WeightSet":
        """Divide every weight by the total when the total is not 1."""
        total = self.total
        if math.isclose(total, 1.0, rel_tol=0.0, abs_tol=SUM_TOLERANCE):
            return self
        return WeightSet(**{attr: getattr(self, attr) / total for attr in WEIGHT_KEYS.values()})


DEFAULT_WEIGHTS = WeightSet()


def initial_weights(weights: Mapping[str, Any]) -> WeightSet:
    """Complete, normalized WeightSet from configured defaults."""
    weight_set = WeightSet.from_mapping(weights)
    if weight_set.total <= 0:
        raise InvalidWeightValue("Weights cannot all be zero")
    return weight_set.normalized()


def validate_weight_mapping(weights: Mapping[str, Any]) -> None:
    """
    Validate a (possibly partial) weight mapping.

    Raises:
        InvalidWeightKey: If a key is not one of the six recognized weights.
        InvalidWeightValue: If a value is not a real number in [0, 1].
    """
    for key, value in weights.items():
        if key not in WEIGHT_KEYS:
            raise InvalidWeightKey(f"Invalid weight key: {key}")

        if isinstance(value, bool) or not isinstance(value, Real):
            raise InvalidWeightValue(
                f"Invalid weight value for {key}: must be a number between 0 and 1"
            )
        if not (0.0 <= float(value) <= 1.0):
            raise InvalidWeightValue(
                f"Invalid weight value for {key}: must be a number between 0 and 1, got {value}"
            )


class WeightStore:
    """Holds the process-wide current WeightSet."""

    def __init__(self, initial: Optional[WeightSet] = None):
        self._weights = initial or DEFAULT_WEIGHTS
        self._lock = threading.Lock()

    def current(self) -> WeightSet:
        return self._weights

    def update(self, partial: Mapping[str, Any]) -> WeightSet:
        """
        Merge a partial update into the current weights and renormalize.

        Every weight (including ones not in the update) is divided by the
        new total, so updating one weight shifts the others.

        Args:
            partial: Mapping of wire keys (damage, winRate, ...) to values in [0, 1].

        Returns:
            The full resulting WeightSet.

        Raises:
            InvalidWeightKey / InvalidWeightValue: Nothing is applied on error.
        """
        validate_weight_mapping(partial)

        with self._lock:
            merged = self._weights.merged(partial)
            if merged.total <= 0:
                raise InvalidWeightValue("Weights cannot all be zero")
            new_weights = merged.normalized()
            self._weights = new_weights

        logger.info(f"Scoring weights updated: {new_weights.to_dict()}")
        return new_weights

    def reset(self, weights: Optional[WeightSet] = None) -> WeightSet:
        with self._lock:
            self._weights = weights or DEFAULT_WEIGHTS
        return self._weights


# Global weight store instance
_weight_store = WeightStore()


def get_weight_store() -> WeightStore:
    """Get the global weight store instance."""
    return _weight_store
