#!/usr/bin/env python3
"""
Vehicle service - read side of the vehicle collection with response caching.
"""

import json
import logging
import math
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from core.cache import STATS_KEY, vehicle_key, vehicle_list_key, ranking_key
from core.exceptions import VehicleNotFound
from database.repositories import VehicleRepository, VehicleFilters, SortOptions

logger = logging.getLogger(__name__)

LIST_TTL_SECONDS = 5 * 60
STATS_TTL_SECONDS = 30 * 60
RANKING_TTL_SECONDS = 10 * 60
VEHICLE_TTL_SECONDS = 60 * 60

MAX_PAGE_SIZE = 100
MAX_RANKING_LIMIT = 50


class VehicleService:
    """Service for browsing vehicles, rankings and collection stats."""

    def __init__(self, db: Session, cache=None):
        self.repo = VehicleRepository(db)
        self.cache = cache

    def _cached(self, key: str):
        return self.cache.get(key) if self.cache else None

    def _store(self, key: str, value: Any, ttl_seconds: int) -> None:
        if self.cache:
            self.cache.set(key, value, ttl_seconds)

    def list_vehicles(
        self,
        filters: VehicleFilters,
        sort: SortOptions,
        page: int = 1,
        limit: int = 50
    ) -> Dict[str, Any]:
        """
        Get one page of vehicles.

        Returns:
            Dict with `data` (vehicle dicts) and `pagination`.
        """
        page = max(page, 1)
        limit = min(max(limit, 1), MAX_PAGE_SIZE)

        cache_key = vehicle_list_key(json.dumps({
            "filters": filters.__dict__,
            "sort": sort.__dict__,
            "pagination": {"page": page, "limit": limit},
        }, sort_keys=True))

        result = self._cached(cache_key)
        if result is None:
            vehicles, total = self.repo.get_vehicles_page(filters, sort, page, limit)
            result = {"vehicles": [v.to_dict() for v in vehicles], "total": total}
            self._store(cache_key, result, LIST_TTL_SECONDS)

        total = result["total"]
        return {
            "data": result["vehicles"],
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "totalPages": math.ceil(total / limit),
            },
        }

    def get_vehicle(self, vehicle_id: int) -> Dict[str, Any]:
        cache_key = vehicle_key(vehicle_id)
        cached = self._cached(cache_key)
        if cached:
            return cached

        vehicle = self.repo.get_by_id(vehicle_id)
        if vehicle is None:
            raise VehicleNotFound(f"Vehicle {vehicle_id} not found")

        data = vehicle.to_dict()
        self._store(cache_key, data, VEHICLE_TTL_SECONDS)
        return data

    def get_stats(self) -> Dict[str, Any]:
        cached = self._cached(STATS_KEY)
        if cached:
            return cached

        stats = self.repo.get_stats()
        self._store(STATS_KEY, stats, STATS_TTL_SECONDS)
        return stats

    def get_rankings(
        self,
        category: str,
        limit: int = 10,
        tier: Optional[int] = None,
        vehicle_type: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        limit = min(max(limit, 1), MAX_RANKING_LIMIT)
        cache_key = ranking_key(f"{category}_{limit}_{tier or 'all'}_{vehicle_type or 'all'}")

        cached = self._cached(cache_key)
        if cached is not None:
            return cached

        vehicles = self.repo.get_top_vehicles(category, limit, tier, vehicle_type)
        data = [v.to_dict() for v in vehicles]
        self._store(cache_key, data, RANKING_TTL_SECONDS)
        return data

    def compare(self, vehicle_ids: List[int]) -> List[Dict[str, Any]]:
        """Vehicles in the requested order; every id must exist."""
        found = {v.id: v for v in self.repo.get_by_ids(vehicle_ids)}
        missing = [vid for vid in vehicle_ids if vid not in found]
        if missing:
            raise VehicleNotFound(f"Vehicles not found: {', '.join(str(m) for m in missing)}")
        return [found[vid].to_dict() for vid in vehicle_ids]
