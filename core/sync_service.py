"""Vehicle Sync Service - copies the upstream encyclopedia into storage."""

import logging
from typing import Any, Dict

from sqlalchemy.exc import SQLAlchemyError

from core.cache import (
    STATS_KEY,
    UPSTREAM_ALL_KEY,
    LIST_KEY_PATTERN,
    RANKING_KEY_PATTERN,
    vehicle_key,
    upstream_vehicle_key,
)
from core.exceptions import UpstreamSourceError, VehicleNotFound, PersistenceError
from database.uow import vehicle_uow

logger = logging.getLogger(__name__)


class VehicleSyncService:
    """
    Upserts upstream vehicles in a single transaction per call.

    Raw attributes are overwritten; stored scores are left untouched and
    are refreshed by the next recalculation.
    """

    def __init__(self, client, uow_factory=vehicle_uow, cache=None):
        self.client = client
        self.uow_factory = uow_factory
        self.cache = cache

    def sync_all(self) -> int:
        """
        Fetch every vehicle upstream and upsert it.

        Returns:
            Number of vehicles synchronized.

        Raises:
            UpstreamSourceError: Upstream failed or returned no vehicles.
            PersistenceError: The write failed; nothing is committed.
        """
        vehicles = self.client.fetch_all_vehicles()
        if not vehicles:
            raise UpstreamSourceError("No vehicles returned by the Wargaming API")

        logger.info(f"Synchronizing {len(vehicles)} vehicles...")
        try:
            with self.uow_factory() as repo:
                count = repo.bulk_upsert(vehicles)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to synchronize vehicles: {e}") from e

        self._invalidate_collection()
        for data in vehicles:
            self._delete(vehicle_key(data["id"]))

        logger.info(f"✅ {count} vehicles synchronized")
        return count

    def sync_vehicle(self, tank_id: int) -> Dict[str, Any]:
        """Refresh one vehicle from upstream and return its stored representation."""
        # Skip the upstream memo so a manual refresh sees current data
        self._delete(upstream_vehicle_key(tank_id))

        data = self.client.fetch_vehicle(tank_id)
        if data is None:
            raise VehicleNotFound(f"Vehicle {tank_id} not found upstream")

        try:
            with self.uow_factory() as repo:
                vehicle = repo.upsert_vehicle(data)
                result = vehicle.to_dict()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to synchronize vehicle {tank_id}: {e}") from e

        self._delete(vehicle_key(tank_id))
        self._invalidate_collection()
        logger.info(f"Vehicle {tank_id} synchronized")
        return result

    def _invalidate_collection(self) -> None:
        if not self.cache:
            return
        self.cache.delete(UPSTREAM_ALL_KEY)
        self.cache.delete(STATS_KEY)
        self.cache.delete_pattern(LIST_KEY_PATTERN)
        self.cache.delete_pattern(RANKING_KEY_PATTERN)

    def _delete(self, key: str) -> None:
        if self.cache:
            self.cache.delete(key)
