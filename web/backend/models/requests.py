#!/usr/bin/env python3
"""
Request models for API endpoints.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional


class WeightsUpdate(BaseModel):
    """
    Request to update scoring weights.

    Keys and values are validated by the scoring engine so that an unknown
    key or an out-of-range value is reported as a 400 with its own error type.
    """
    weights: Dict[str, Any] = Field(
        ...,
        description="Partial mapping of damage, winRate, survival, armor, mobility, penetration to [0, 1]"
    )


class RecalculateRequest(BaseModel):
    """Optional per-call weight override for a recalculation. Never persisted."""
    weights: Optional[Dict[str, Any]] = Field(None, description="Partial weight override")


class CompareRequest(BaseModel):
    """Request to compare 2 to 4 vehicles."""
    model_config = ConfigDict(populate_by_name=True)

    tank_ids: List[int] = Field(..., alias="tankIds", description="Vehicle ids to compare (2-4)")
