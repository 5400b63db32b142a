#!/usr/bin/env python3
"""
Relative Scores - a vehicle's overall score rescaled against its cohort.

Cohorts are vehicles sharing a tier or a category (type). The cohort
average is memoized in the cache; the cache is only a memo over
`_compute_average`, so an unavailable cache just means recomputation.

Formula: clamp(overall / cohort_average * 75, 0, 100)
"""

import logging
from typing import Iterable, Optional

from core.cache import tier_average_key, type_average_key

logger = logging.getLogger(__name__)

BASELINE_SCORE = 75.0
COHORT_AVERAGE_TTL_SECONDS = 3600


def mean_overall(scores: Iterable[Optional[float]]) -> Optional[float]:
    """Arithmetic mean of overall scores, unset scores counting as 0. None when empty."""
    values = [float(s) if s is not None else 0.0 for s in scores]
    if not values:
        return None
    return sum(values) / len(values)


def relative_score(overall: float, cohort_average: Optional[float]) -> float:
    """
    Rescale an overall score around the baseline of 75.

    A missing, zero or negative cohort average falls back to the baseline.
    """
    if cohort_average is None or cohort_average <= 0:
        cohort_average = BASELINE_SCORE
    return min(100.0, max(0.0, (overall / cohort_average) * BASELINE_SCORE))


class CohortAverageCalculator:
    """Looks up (or recomputes and caches) tier and type average overall scores."""

    def __init__(self, repo, cache=None, ttl_seconds: int = COHORT_AVERAGE_TTL_SECONDS):
        self.repo = repo
        self.cache = cache
        self.ttl_seconds = ttl_seconds

    def tier_average(self, tier: int) -> float:
        return self._cohort_average(
            tier_average_key(tier),
            lambda: self.repo.get_cohort_scores(tier=tier)
        )

    def type_average(self, vehicle_type: str) -> float:
        return self._cohort_average(
            type_average_key(vehicle_type),
            lambda: self.repo.get_cohort_scores(vehicle_type=vehicle_type)
        )

    def _cohort_average(self, cache_key: str, load_scores) -> float:
        cached = self.cache.get(cache_key) if self.cache else None
        if cached is not None:
            try:
                cached = float(cached)
            except (TypeError, ValueError):
                cached = None
        if cached:
            return cached

        average = mean_overall(load_scores())
        if average is None:
            logger.debug(f"Empty cohort for {cache_key}, using baseline {BASELINE_SCORE}")
            return BASELINE_SCORE

        if self.cache:
            self.cache.set(cache_key, average, self.ttl_seconds)
        return average
