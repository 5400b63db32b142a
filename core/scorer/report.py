#!/usr/bin/env python3
"""
Score Report - totals, averages and distribution of stored scores.
"""

from typing import Dict, Iterable, List, Optional, Tuple

# (label, inclusive lower bound), highest band first
SCORE_BANDS: List[Tuple[str, float]] = [
    ("90-100", 90.0),
    ("80-89", 80.0),
    ("70-79", 70.0),
    ("60-69", 60.0),
    ("0-59", float("-inf")),
]


def score_band(score: Optional[float]) -> str:
    value = float(score) if score is not None else 0.0
    for label, lower_bound in SCORE_BANDS:
        if value >= lower_bound:
            return label
    return SCORE_BANDS[-1][0]


def score_distribution(scores: Iterable[Optional[float]]) -> Dict[str, int]:
    """Count overall scores per band. Every band is present, unset scores count as 0."""
    distribution = {label: 0 for label, _ in SCORE_BANDS}
    for score in scores:
        distribution[score_band(score)] += 1
    return distribution


def average_scores(
    triples: List[Tuple[Optional[float], Optional[float], Optional[float]]]
) -> Dict[str, float]:
    """Mean overall/tier/type scores; 0 for an empty collection."""
    if not triples:
        return {"overall": 0.0, "tier": 0.0, "type": 0.0}

    count = len(triples)
    totals = [0.0, 0.0, 0.0]
    for triple in triples:
        for i, value in enumerate(triple):
            totals[i] += float(value) if value is not None else 0.0

    return {
        "overall": totals[0] / count,
        "tier": totals[1] / count,
        "type": totals[2] / count,
    }
