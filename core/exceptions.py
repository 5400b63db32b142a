#!/usr/bin/env python3
"""
Service exceptions shared by the scoring engine, sync and web layers.
"""


class ServiceException(Exception):
    """Base exception for service layer errors."""
    pass


class InvalidWeightKey(ServiceException):
    """Raised when a weight update names an unknown weight."""
    pass


class InvalidWeightValue(ServiceException):
    """Raised when a weight value is not a number in [0, 1]."""
    pass


class VehicleNotFound(ServiceException):
    """Raised when a vehicle is not found."""
    pass


class UpstreamSourceError(ServiceException):
    """Raised when the external game-data API is unreachable or returns an error."""
    pass


class PersistenceError(ServiceException):
    """Raised when a storage write fails."""
    pass
