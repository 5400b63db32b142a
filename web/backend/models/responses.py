#!/usr/bin/env python3
"""
Response models for API endpoints.

Every endpoint answers with the `{success, data, message?}` envelope.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Dict, Any


class WeightsData(BaseModel):
    """The six scoring weights (wire names)."""
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "damage": 0.25,
                "winRate": 0.20,
                "survival": 0.15,
                "armor": 0.15,
                "mobility": 0.15,
                "penetration": 0.10
            }
        }
    )

    damage: float
    win_rate: float = Field(alias="winRate")
    survival: float
    armor: float
    mobility: float
    penetration: float


class VehicleData(BaseModel):
    """A stored vehicle with its raw attributes and derived scores."""
    id: int
    name: str
    tier: int
    type: str
    nation: str
    is_premium: bool = False
    image_url: Optional[str] = None
    description: Optional[str] = None
    health: int
    armor_front: Optional[int] = 0
    armor_side: Optional[int] = 0
    armor_rear: Optional[int] = 0
    gun_damage: Optional[int] = 0
    gun_penetration: Optional[int] = 0
    gun_rof: Optional[float] = 0.0
    mobility_speed: Optional[int] = 0
    mobility_power: Optional[int] = 0
    score_overall: Optional[float] = None
    score_tier: Optional[float] = None
    score_type: Optional[float] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    totalPages: int


class WeightsResponse(BaseModel):
    success: bool = True
    data: WeightsData
    message: Optional[str] = None


class RecalculationData(BaseModel):
    updated: int = Field(ge=0)
    errors: int = Field(ge=0)


class RecalculationResponse(BaseModel):
    """Result of a bulk recalculation."""
    success: bool = True
    data: RecalculationData
    message: Optional[str] = None


class VehicleResponse(BaseModel):
    success: bool = True
    data: VehicleData
    message: Optional[str] = None


class VehicleListResponse(BaseModel):
    success: bool = True
    data: List[VehicleData]
    pagination: Optional[Pagination] = None


class AverageScores(BaseModel):
    overall: float
    tier: float
    type: float


class ScoreReportData(BaseModel):
    """Collection-wide score report."""
    totalVehicles: int
    averageScores: AverageScores
    topPerformers: List[VehicleData]
    scoreDistribution: Dict[str, int]


class ScoreReportResponse(BaseModel):
    success: bool = True
    data: ScoreReportData


class SimulationData(BaseModel):
    tankId: int
    tankName: str
    currentScore: float
    simulatedScore: float
    difference: float
    weights: WeightsData


class SimulationResponse(BaseModel):
    """Current vs. hypothetical overall score for one vehicle."""
    success: bool = True
    data: SimulationData


class StatsData(BaseModel):
    total: int
    byTier: Dict[int, int]
    byType: Dict[str, int]
    byNation: Dict[str, int]


class StatsResponse(BaseModel):
    success: bool = True
    data: StatsData


class SyncData(BaseModel):
    count: int


class SyncResponse(BaseModel):
    success: bool = True
    data: SyncData
    message: Optional[str] = None


class HealthResponse(BaseModel):
    status: str
    service: str
    cache: Dict[str, Any] = Field(default_factory=dict)
