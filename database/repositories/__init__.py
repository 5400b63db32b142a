from database.repositories.base import BaseRepository
from database.repositories.vehicle import VehicleRepository, VehicleFilters, SortOptions

__all__ = [
    'BaseRepository',
    'VehicleRepository',
    'VehicleFilters',
    'SortOptions',
]
