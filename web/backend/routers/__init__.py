"""API route handlers."""

from .scoring import router as scoring_router
from .vehicles import router as vehicles_router
