#!/usr/bin/env python3
"""
Scoring Module - per-vehicle combat scores.

Public API:
- ScoringService: Main scoring service orchestrator
- WeightSet / WeightStore: Scoring weights and the process-wide current set
- calculate_overall_score: Pure overall score function

Modules:

- models.py: Data structures (VehicleSnapshot, DimensionScores, VehicleScores)
- reference.py: Normalization ceilings
- weights.py: Weight validation, merging and renormalization
- dimensions.py: The six per-dimension scorers
- overall.py: Weighted aggregation and rounding
- relative.py: Tier / type scores against cohort averages
- recalculation.py: Paged bulk recalculation
- report.py: Score distribution and averages
- service.py: ScoringService orchestrator
"""

from core.scorer.models import VehicleSnapshot, DimensionScores, VehicleScores, RecalculationSummary
from core.scorer.overall import calculate_overall_score
from core.scorer.service import ScoringService
from core.scorer.weights import WeightSet, WeightStore, DEFAULT_WEIGHTS, get_weight_store, initial_weights

__all__ = [
    'ScoringService',
    'VehicleSnapshot',
    'DimensionScores',
    'VehicleScores',
    'RecalculationSummary',
    'WeightSet',
    'WeightStore',
    'DEFAULT_WEIGHTS',
    'get_weight_store',
    'initial_weights',
    'calculate_overall_score',
]
