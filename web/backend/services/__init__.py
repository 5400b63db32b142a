"""Business logic services."""

from .vehicle_service import VehicleService
