#!/usr/bin/env python3
"""
Bulk Recalculation - paged sweep over the whole vehicle collection.

VehiclePager yields pages of vehicles ordered by id ascending until an
empty page comes back; iterating it again restarts from page 1.
`recalculate_all` folds the pages into a RecalculationSummary, isolating
per-vehicle failures.
"""

import logging
from typing import Any, Callable, Iterator, List, Optional

from core.scorer.models import RecalculationSummary
from database.repositories.vehicle import SortOptions

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 50
PROGRESS_LOG_INTERVAL = 10


class VehiclePager:
    """Finite, restartable iterator over pages of vehicles."""

    def __init__(self, repo, page_size: int = DEFAULT_PAGE_SIZE, filters=None):
        if page_size < 1:
            raise ValueError(f"page_size must be positive, got {page_size}")
        self.repo = repo
        self.page_size = page_size
        self.filters = filters

    def __iter__(self) -> Iterator[List[Any]]:
        sort = SortOptions(field="id", order="asc")
        page = 1
        while True:
            vehicles, _total = self.repo.get_vehicles_page(
                filters=self.filters,
                sort=sort,
                page=page,
                limit=self.page_size
            )
            if not vehicles:
                return
            yield vehicles
            page += 1


def recalculate_all(
    pages: VehiclePager,
    update_vehicle: Callable[[Any], Any],
    on_error: Optional[Callable[[Any, Exception], None]] = None
) -> RecalculationSummary:
    """
    Apply `update_vehicle` to every vehicle of every page.

    A failing vehicle is logged, handed to `on_error` and counted; the
    sweep continues. Errors raised while fetching a page propagate.
    """
    summary = RecalculationSummary()

    for page in pages:
        for vehicle in page:
            vehicle_id = getattr(vehicle, "id", None)
            try:
                update_vehicle(vehicle)
            except Exception as e:
                logger.error(f"Error recalculating scores for vehicle {vehicle_id}: {e}")
                summary.errors += 1
                if on_error:
                    on_error(vehicle, e)
                continue

            summary.updated += 1
            if summary.updated % PROGRESS_LOG_INTERVAL == 0:
                logger.info(f"{summary.updated} vehicles processed...")

    return summary
