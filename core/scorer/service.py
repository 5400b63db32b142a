#!/usr/bin/env python3
"""
Scoring Service - orchestrates the scoring engine against storage and cache.

- Overall score: weighted sum of six dimension scores (current weights
  from the WeightStore, or a per-call override that is never persisted)
- Tier / type scores: overall score relative to the cohort average
- Bulk recalculation: paged sweep with per-vehicle error isolation
- Report and simulation helpers for the HTTP layer
"""

import logging
from typing import Any, Dict, Mapping, Optional, Union

from sqlalchemy.exc import SQLAlchemyError

from core.cache import (
    STATS_KEY,
    UPSTREAM_ALL_KEY,
    LIST_KEY_PATTERN,
    RANKING_KEY_PATTERN,
    vehicle_key,
    tier_average_key,
    type_average_key,
)
from core.config_loader import ScoringConfig
from core.exceptions import VehicleNotFound, PersistenceError
from core.scorer.dimensions import calculate_dimension_scores
from core.scorer.models import VehicleSnapshot, VehicleScores, RecalculationSummary, DimensionScores
from core.scorer.overall import calculate_overall_score, round2
from core.scorer.recalculation import VehiclePager, recalculate_all
from core.scorer.reference import ReferenceValues, DEFAULT_REFERENCE_VALUES
from core.scorer.relative import CohortAverageCalculator, relative_score
from core.scorer.report import average_scores, score_distribution
from core.scorer.weights import WeightSet, WeightStore, get_weight_store

logger = logging.getLogger(__name__)

TOP_PERFORMERS_LIMIT = 10

WeightsOverride = Optional[Union[WeightSet, Mapping[str, Any]]]


def _snapshot(vehicle: Any) -> VehicleSnapshot:
    if isinstance(vehicle, VehicleSnapshot):
        return vehicle
    return VehicleSnapshot.from_record(vehicle)


class ScoringService:
    """
    Scoring orchestrator bound to one repository (one DB session).

    Args:
        repo: VehicleRepository (storage collaborator).
        cache: ScoreCacheService or None; failures and absence are non-fatal.
        weight_store: Holder of the process-wide current weights.
        config: ScoringConfig (page size, cohort cache TTL).
        reference: Normalization ceilings.
    """

    def __init__(
        self,
        repo,
        cache=None,
        weight_store: Optional[WeightStore] = None,
        config: Optional[ScoringConfig] = None,
        reference: ReferenceValues = DEFAULT_REFERENCE_VALUES
    ):
        self.repo = repo
        self.cache = cache
        self.weight_store = weight_store or get_weight_store()
        self.config = config or ScoringConfig()
        self.reference = reference
        self.cohorts = CohortAverageCalculator(
            repo, cache, ttl_seconds=self.config.cohort_average_ttl_seconds
        )

    # Weights

    def get_current_weights(self) -> WeightSet:
        return self.weight_store.current()

    def update_weights(self, partial: Mapping[str, Any]) -> WeightSet:
        return self.weight_store.update(partial)

    def resolve_weights(self, custom_weights: WeightsOverride = None) -> WeightSet:
        """Current weights, a complete override, or current weights merged with a partial override."""
        if custom_weights is None:
            return self.weight_store.current()
        if isinstance(custom_weights, WeightSet):
            return custom_weights
        return self.weight_store.current().merged(custom_weights)

    # Scores

    def calculate_dimension_scores(self, vehicle: Any) -> DimensionScores:
        return calculate_dimension_scores(_snapshot(vehicle), self.reference)

    def calculate_overall_score(self, vehicle: Any, weights: WeightsOverride = None) -> float:
        return calculate_overall_score(
            _snapshot(vehicle), self.resolve_weights(weights), self.reference
        )

    def calculate_tier_score(self, vehicle: Any, overall: Optional[float] = None) -> float:
        snapshot = _snapshot(vehicle)
        if overall is None:
            overall = self.calculate_overall_score(snapshot)
        return relative_score(overall, self.cohorts.tier_average(snapshot.tier))

    def calculate_type_score(self, vehicle: Any, overall: Optional[float] = None) -> float:
        snapshot = _snapshot(vehicle)
        if overall is None:
            overall = self.calculate_overall_score(snapshot)
        return relative_score(overall, self.cohorts.type_average(snapshot.type))

    def calculate_scores(self, vehicle: Any, custom_weights: WeightsOverride = None) -> VehicleScores:
        """Compute the three derived values without persisting anything."""
        snapshot = _snapshot(vehicle)
        overall = self.calculate_overall_score(snapshot, custom_weights)
        return VehicleScores(
            overall=overall,
            tier=self.calculate_tier_score(snapshot, overall),
            type=self.calculate_type_score(snapshot, overall),
        )

    def update_vehicle_scores(self, vehicle: Any, custom_weights: WeightsOverride = None):
        """
        Recompute, persist and invalidate caches for one vehicle.

        Returns:
            The updated Vehicle row.

        Raises:
            VehicleNotFound: If the vehicle no longer exists.
            PersistenceError: If the storage write fails.
        """
        snapshot = _snapshot(vehicle)
        scores = self.calculate_scores(snapshot, custom_weights)

        try:
            updated = self.repo.update_scores(
                snapshot.id,
                overall=scores.overall,
                tier=scores.tier,
                type=scores.type
            )
            if updated is None:
                raise VehicleNotFound(f"Vehicle {snapshot.id} not found")
            self.repo.commit()
        except SQLAlchemyError as e:
            self.repo.rollback()
            raise PersistenceError(f"Failed to save scores for vehicle {snapshot.id}: {e}") from e

        self.invalidate_vehicle_cache(snapshot)
        return updated

    def recalculate_vehicle(self, vehicle_id: int, custom_weights: WeightsOverride = None):
        """Recalculate a single vehicle by id."""
        vehicle = self.repo.get_by_id(vehicle_id)
        if vehicle is None:
            raise VehicleNotFound(f"Vehicle {vehicle_id} not found")

        weights = self.resolve_weights(custom_weights)
        updated = self.update_vehicle_scores(vehicle, weights)
        self._delete_pattern(RANKING_KEY_PATTERN)
        self._delete_pattern(LIST_KEY_PATTERN)
        return updated

    def recalculate_all_scores(self, custom_weights: WeightsOverride = None) -> RecalculationSummary:
        """
        Recompute and persist scores for every vehicle.

        Per-vehicle failures are rolled back and counted; a failure to
        fetch a page aborts the sweep.
        """
        weights = self.resolve_weights(custom_weights)
        logger.info("Starting recalculation of all scores...")

        def on_error(vehicle, exc):
            self.repo.rollback()

        pager = VehiclePager(self.repo, page_size=self.config.page_size)
        try:
            summary = recalculate_all(
                pager,
                lambda vehicle: self.update_vehicle_scores(vehicle, weights),
                on_error=on_error
            )
        except Exception as e:
            logger.error(f"Global recalculation failed: {e}")
            raise

        logger.info(
            f"Recalculation finished: {summary.updated} vehicles updated, {summary.errors} errors"
        )
        self.invalidate_all_score_cache()
        return summary

    # Report / simulation

    def generate_score_report(self) -> Dict[str, Any]:
        stats = self.repo.get_stats()
        top = self.repo.get_top_vehicles('overall', TOP_PERFORMERS_LIMIT)
        triples = self.repo.get_all_scores()

        return {
            "totalVehicles": stats["total"],
            "averageScores": average_scores(triples),
            "topPerformers": [v.to_dict() for v in top],
            "scoreDistribution": score_distribution(t[0] for t in triples),
        }

    def simulate_score(self, vehicle_id: int, weights: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """Compare the current overall score with one under hypothetical weights."""
        vehicle = self.repo.get_by_id(vehicle_id)
        if vehicle is None:
            raise VehicleNotFound(f"Vehicle {vehicle_id} not found")

        current_weights = self.weight_store.current()
        simulation_weights = current_weights.merged(weights) if weights else current_weights

        current_score = self.calculate_overall_score(vehicle, current_weights)
        simulated_score = self.calculate_overall_score(vehicle, simulation_weights)

        return {
            "tankId": vehicle.id,
            "tankName": vehicle.name,
            "currentScore": current_score,
            "simulatedScore": simulated_score,
            "difference": round2(simulated_score - current_score),
            "weights": simulation_weights.to_dict(),
        }

    # Cache invalidation

    def invalidate_vehicle_cache(self, vehicle: VehicleSnapshot) -> None:
        if not self.cache:
            return
        keys = [
            vehicle_key(vehicle.id),
            tier_average_key(vehicle.tier),
            type_average_key(vehicle.type),
        ]
        for key in keys:
            self.cache.delete(key)

    def invalidate_all_score_cache(self) -> None:
        if not self.cache:
            return
        self.cache.delete(STATS_KEY)
        self.cache.delete(UPSTREAM_ALL_KEY)
        self._delete_pattern(RANKING_KEY_PATTERN)
        self._delete_pattern(LIST_KEY_PATTERN)

    def _delete_pattern(self, pattern: str) -> None:
        if self.cache:
            self.cache.delete_pattern(pattern)
