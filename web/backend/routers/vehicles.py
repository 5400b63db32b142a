#!/usr/bin/env python3
"""
Vehicle endpoints - browse, rank, compare and sync vehicles.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from core.sync_service import VehicleSyncService
from database.repositories import VehicleFilters, SortOptions
from ..dependencies import get_db, get_cache, get_sync_service
from ..services.vehicle_service import VehicleService
from ..models.requests import CompareRequest
from ..models.responses import (
    VehicleListResponse,
    VehicleResponse,
    StatsResponse,
    SyncResponse
)
from ..rate_limit import limiter, SYNC_LIMIT

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tanks", tags=["tanks"])


def get_vehicle_service(db: Session = Depends(get_db), cache=Depends(get_cache)) -> VehicleService:
    return VehicleService(db, cache)


@router.get("", response_model=VehicleListResponse)
def get_vehicles(
    tier: Optional[List[int]] = Query(default=None, description="Tier filter (repeatable)"),
    type: Optional[List[str]] = Query(default=None, description="Vehicle type filter (repeatable)"),
    nation: Optional[List[str]] = Query(default=None, description="Nation filter (repeatable)"),
    is_premium: Optional[bool] = Query(default=None),
    search: Optional[str] = Query(default=None, description="Case-insensitive name search"),
    sort_field: str = Query(default="score_overall"),
    sort_order: str = Query(default="desc"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=50, ge=1, description="Page size, capped at 100"),
    service: VehicleService = Depends(get_vehicle_service)
):
    """
    Get a page of vehicles with filters and sorting.

    Unknown sort fields are rejected with 400.
    """
    filters = VehicleFilters(
        tiers=tier or [],
        types=type or [],
        nations=nation or [],
        is_premium=is_premium,
        search=search
    )
    try:
        sort = SortOptions(field=sort_field, order=sort_order)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    result = service.list_vehicles(filters, sort, page, limit)
    return VehicleListResponse(data=result["data"], pagination=result["pagination"])


@router.get("/stats", response_model=StatsResponse)
def get_stats(service: VehicleService = Depends(get_vehicle_service)):
    """Vehicle counts in total and per tier, type and nation."""
    return StatsResponse(data=service.get_stats())


@router.get("/rankings/{category}", response_model=VehicleListResponse)
def get_rankings(
    category: str,
    limit: int = Query(default=10, ge=1, description="Capped at 50"),
    tier: Optional[int] = Query(default=None, ge=1, le=10),
    type: Optional[str] = Query(default=None),
    service: VehicleService = Depends(get_vehicle_service)
):
    """Top vehicles by overall, tier-relative or type-relative score."""
    if category not in ("overall", "tier", "type"):
        raise HTTPException(status_code=400, detail=f"Invalid ranking category: {category}")

    return VehicleListResponse(data=service.get_rankings(category, limit, tier, type))


@router.get("/{tank_id}", response_model=VehicleResponse)
def get_vehicle(tank_id: int, service: VehicleService = Depends(get_vehicle_service)):
    return VehicleResponse(data=service.get_vehicle(tank_id))


@router.post("/compare", response_model=VehicleListResponse)
def compare_vehicles(body: CompareRequest, service: VehicleService = Depends(get_vehicle_service)):
    """Compare 2 to 4 vehicles side by side."""
    if not 2 <= len(body.tank_ids) <= 4:
        raise HTTPException(status_code=400, detail="Provide between 2 and 4 vehicle ids to compare")

    return VehicleListResponse(data=service.compare(body.tank_ids))


@router.post("/sync", response_model=SyncResponse)
@limiter.limit(SYNC_LIMIT)
def sync_vehicles(request: Request, sync_service: VehicleSyncService = Depends(get_sync_service)):
    """
    Synchronize every vehicle from the Wargaming API.

    Raw attributes are refreshed; run a recalculation afterwards to refresh scores.
    """
    logger.info("Starting vehicle sync...")
    count = sync_service.sync_all()
    return SyncResponse(
        data={"count": count},
        message=f"{count} vehicles synchronized"
    )


@router.post("/sync/{tank_id}", response_model=VehicleResponse)
@limiter.limit(SYNC_LIMIT)
def sync_vehicle(
    request: Request,
    tank_id: int,
    sync_service: VehicleSyncService = Depends(get_sync_service)
):
    """Refresh one vehicle from the Wargaming API."""
    vehicle = sync_service.sync_vehicle(tank_id)
    return VehicleResponse(data=vehicle, message=f"Vehicle {tank_id} synchronized")
