"""
Pydantic schemas package.
"""
from lifedata.schemas.analysis import (
    GroupedTime,
    EstimateRequest,
    ReliabilityModelInput,
    ReliabilityRequest,
    BestFitRequest,
    ConfidenceBoundsRequest,
    MaintenanceOptimizeRequest,
    MonteCarloRequest
)

__all__ = [
    "GroupedTime",
    "EstimateRequest",
    "ReliabilityModelInput",
    "ReliabilityRequest",
    "BestFitRequest",
    "ConfidenceBoundsRequest",
    "MaintenanceOptimizeRequest",
    "MonteCarloRequest"
]
