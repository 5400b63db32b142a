from .base import Base
from .vehicle import Vehicle

__all__ = [
    'Base',
    'Vehicle',
]
