import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import select, func, delete

from database.models import Vehicle
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = {
    'id', 'name', 'tier', 'type', 'nation', 'health',
    'gun_damage', 'gun_penetration', 'mobility_speed',
    'score_overall', 'score_tier', 'score_type',
}

SCORE_CATEGORIES = {'overall', 'tier', 'type'}


@dataclass
class VehicleFilters:
    tiers: List[int] = field(default_factory=list)
    types: List[str] = field(default_factory=list)
    nations: List[str] = field(default_factory=list)
    is_premium: Optional[bool] = None
    search: Optional[str] = None


@dataclass
class SortOptions:
    field: str = 'score_overall'
    order: str = 'desc'

    def __post_init__(self):
        if self.field not in SORTABLE_FIELDS:
            raise ValueError(
                f"Invalid sort field '{self.field}'. "
                f"Valid options: {', '.join(sorted(SORTABLE_FIELDS))}"
            )
        if self.order not in ('asc', 'desc'):
            raise ValueError(f"Invalid sort order '{self.order}'. Valid options: asc, desc")


class VehicleRepository(BaseRepository):
    def _apply_filters(self, stmt, filters: Optional[VehicleFilters]):
        if filters is None:
            return stmt
        if filters.tiers:
            stmt = stmt.where(Vehicle.tier.in_(filters.tiers))
        if filters.types:
            stmt = stmt.where(Vehicle.type.in_(filters.types))
        if filters.nations:
            stmt = stmt.where(Vehicle.nation.in_(filters.nations))
        if filters.is_premium is not None:
            stmt = stmt.where(Vehicle.is_premium.is_(filters.is_premium))
        if filters.search:
            stmt = stmt.where(Vehicle.name.ilike(f"%{filters.search}%"))
        return stmt

    def get_vehicles_page(
        self,
        filters: Optional[VehicleFilters] = None,
        sort: Optional[SortOptions] = None,
        page: int = 1,
        limit: int = 50
    ) -> Tuple[List[Vehicle], int]:
        sort = sort or SortOptions()

        count_stmt = self._apply_filters(select(func.count()).select_from(Vehicle), filters)
        total = self.db.execute(count_stmt).scalar_one()

        column = getattr(Vehicle, sort.field)
        ordering = column.asc() if sort.order == 'asc' else column.desc()
        stmt = self._apply_filters(select(Vehicle), filters)
        # id as tie-breaker keeps paging stable
        stmt = stmt.order_by(ordering, Vehicle.id.asc())
        stmt = stmt.limit(limit).offset((max(page, 1) - 1) * limit)

        vehicles = self.db.execute(stmt).scalars().all()
        return list(vehicles), total

    def get_by_id(self, vehicle_id: int) -> Optional[Vehicle]:
        return self.db.get(Vehicle, vehicle_id)

    def get_by_ids(self, vehicle_ids: List[int]) -> List[Vehicle]:
        if not vehicle_ids:
            return []
        stmt = select(Vehicle).where(Vehicle.id.in_(vehicle_ids))
        return list(self.db.execute(stmt).scalars().all())

    def update_scores(
        self,
        vehicle_id: int,
        overall: Optional[float] = None,
        tier: Optional[float] = None,
        type: Optional[float] = None
    ) -> Optional[Vehicle]:
        vehicle = self.get_by_id(vehicle_id)
        if vehicle is None:
            return None

        if overall is not None:
            vehicle.score_overall = overall
        if tier is not None:
            vehicle.score_tier = tier
        if type is not None:
            vehicle.score_type = type

        self.flush()
        return vehicle

    def get_cohort_scores(
        self,
        tier: Optional[int] = None,
        vehicle_type: Optional[str] = None
    ) -> List[Optional[float]]:
        """Overall scores (NULL included) of every vehicle in a tier and/or type cohort."""
        stmt = select(Vehicle.score_overall)
        if tier is not None:
            stmt = stmt.where(Vehicle.tier == tier)
        if vehicle_type is not None:
            stmt = stmt.where(Vehicle.type == vehicle_type)
        return list(self.db.execute(stmt).scalars().all())

    def get_all_scores(self) -> List[Tuple[Optional[float], Optional[float], Optional[float]]]:
        """(overall, tier, type) score triples for every vehicle."""
        stmt = select(Vehicle.score_overall, Vehicle.score_tier, Vehicle.score_type)
        return [tuple(row) for row in self.db.execute(stmt).all()]

    def get_top_vehicles(
        self,
        category: str = 'overall',
        limit: int = 10,
        tier: Optional[int] = None,
        vehicle_type: Optional[str] = None
    ) -> List[Vehicle]:
        if category not in SCORE_CATEGORIES:
            raise ValueError(f"Invalid ranking category '{category}'")

        column = getattr(Vehicle, f"score_{category}")
        stmt = select(Vehicle)
        if tier is not None:
            stmt = stmt.where(Vehicle.tier == tier)
        if vehicle_type is not None:
            stmt = stmt.where(Vehicle.type == vehicle_type)
        stmt = stmt.where(column.is_not(None)).order_by(column.desc(), Vehicle.id.asc()).limit(limit)
        return list(self.db.execute(stmt).scalars().all())

    def get_stats(self) -> Dict[str, Any]:
        total = self.db.execute(select(func.count()).select_from(Vehicle)).scalar_one()

        def grouped(column) -> Dict[Any, int]:
            stmt = select(column, func.count()).group_by(column).order_by(column)
            return {key: count for key, count in self.db.execute(stmt).all()}

        return {
            'total': total,
            'byTier': grouped(Vehicle.tier),
            'byType': grouped(Vehicle.type),
            'byNation': grouped(Vehicle.nation),
        }

    def upsert_vehicle(self, data: Dict[str, Any]) -> Vehicle:
        """Insert a vehicle or overwrite its raw attributes. Scores are left untouched."""
        vehicle = self.get_by_id(data['id'])
        if vehicle is None:
            vehicle = Vehicle(id=data['id'])
            self.db.add(vehicle)

        for name in Vehicle.RAW_FIELDS:
            if name in data:
                setattr(vehicle, name, data[name])

        self.flush()
        return vehicle

    def bulk_upsert(self, vehicles: List[Dict[str, Any]]) -> int:
        count = 0
        for data in vehicles:
            self.upsert_vehicle(data)
            count += 1
        logger.info(f"Upserted {count} vehicles")
        return count

    def delete_vehicle(self, vehicle_id: int) -> bool:
        result = self.db.execute(delete(Vehicle).where(Vehicle.id == vehicle_id))
        return result.rowcount > 0
