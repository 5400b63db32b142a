#!/usr/bin/env python3
"""
Scoring endpoints - weights, recalculation, report and simulation.
"""

import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from core.scorer import ScoringService, WeightStore
from ..dependencies import get_scoring_service, get_weight_store
from ..models.requests import WeightsUpdate, RecalculateRequest
from ..models.responses import (
    WeightsResponse,
    RecalculationResponse,
    VehicleResponse,
    ScoreReportResponse,
    SimulationResponse
)
from ..rate_limit import limiter, RECALCULATE_LIMIT

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/scoring", tags=["scoring"])


@router.get("/weights", response_model=WeightsResponse)
def get_weights(weight_store: WeightStore = Depends(get_weight_store)):
    """Get the current scoring weights."""
    return WeightsResponse(data=weight_store.current().to_dict())


@router.put("/weights", response_model=WeightsResponse)
def update_weights(
    body: WeightsUpdate,
    weight_store: WeightStore = Depends(get_weight_store)
):
    """
    Update scoring weights.

    Accepts a partial mapping; the merged set is renormalized to sum to 1,
    which also rescales weights that were not part of the update. Stored
    scores are not recomputed until the next recalculation.
    """
    weights = weight_store.update(body.weights)
    return WeightsResponse(
        data=weights.to_dict(),
        message="Scoring weights updated"
    )


@router.post("/recalculate", response_model=RecalculationResponse)
@limiter.limit(RECALCULATE_LIMIT)
def recalculate_scores(
    request: Request,
    body: Optional[RecalculateRequest] = None,
    service: ScoringService = Depends(get_scoring_service)
):
    """
    Recalculate and persist scores for every vehicle.

    Optional `weights` apply to this run only.
    """
    custom_weights = body.weights if body else None
    summary = service.recalculate_all_scores(custom_weights)
    return RecalculationResponse(
        data=summary.to_dict(),
        message=f"Recalculation finished: {summary.updated} vehicles updated, {summary.errors} errors"
    )


@router.post("/tank/{tank_id}", response_model=VehicleResponse)
def recalculate_vehicle_score(
    tank_id: int,
    body: Optional[RecalculateRequest] = None,
    service: ScoringService = Depends(get_scoring_service)
):
    """Recalculate and persist scores for one vehicle."""
    custom_weights = body.weights if body else None
    vehicle = service.recalculate_vehicle(tank_id, custom_weights)
    return VehicleResponse(
        data=vehicle.to_dict(),
        message="Vehicle scores updated"
    )


@router.get("/report", response_model=ScoreReportResponse)
def get_score_report(service: ScoringService = Depends(get_scoring_service)):
    """
    Collection-wide report: totals, average scores, top 10 vehicles by
    overall score and the overall score distribution.
    """
    return ScoreReportResponse(data=service.generate_score_report())


@router.get("/simulate/{tank_id}", response_model=SimulationResponse)
def simulate_score(
    tank_id: int,
    weights: Optional[str] = Query(default=None, description="JSON object of partial weights"),
    service: ScoringService = Depends(get_scoring_service)
):
    """
    Compare a vehicle's overall score under the current weights with the
    score under hypothetical weights. Nothing is persisted.
    """
    simulation_weights = None
    if weights:
        try:
            simulation_weights = json.loads(weights)
        except json.JSONDecodeError:
            raise HTTPException(status_code=400, detail="Invalid weights format: expected a JSON object")
        if not isinstance(simulation_weights, dict):
            raise HTTPException(status_code=400, detail="Invalid weights format: expected a JSON object")

    return SimulationResponse(data=service.simulate_score(tank_id, simulation_weights))
