"""
Pydantic schemas for life-data analysis endpoints.
"""
from pydantic import BaseModel, Field
from typing import List, Optional, Dict, Any, Union


class GroupedTime(BaseModel):
    """A time with the number of units observed at it."""
    time: float = Field(..., description="Observation time")
    qty: int = Field(default=1, ge=0, description="Number of units")


class EstimateRequest(BaseModel):
    """Request for parameter estimation of one distribution."""
    distribution: str = Field(default="Weibull", description="Distribution family name")
    failure_times: List[Union[float, GroupedTime]] = Field(
        default_factory=list,
        description="Failure times, or {time, qty} groups when is_grouped"
    )
    suspension_times: List[Union[float, GroupedTime]] = Field(
        default_factory=list,
        description="Suspension (right-censored) times"
    )
    method: str = Field(default="SRM", description="SRM, RRX or MLE")
    is_grouped: bool = Field(default=False, description="Whether times are grouped counts")

    def failures_payload(self) -> List[Any]:
        return [_payload(item) for item in self.failure_times]

    def suspensions_payload(self) -> List[Any]:
        return [_payload(item) for item in self.suspension_times]


def _payload(item: Union[float, GroupedTime]) -> Any:
    if isinstance(item, GroupedTime):
        return {"time": item.time, "qty": item.qty}
    return item


class ReliabilityModelInput(BaseModel):
    """A named model to evaluate."""
    name: str = Field(..., description="Series name")
    distribution: str = Field(..., description="Distribution family name")
    parameters: Dict[str, Optional[float]] = Field(
        default_factory=dict,
        description="Model parameters; null marks a value the dashboard left undefined"
    )
    failure_times: List[float] = Field(default_factory=list)
    suspension_times: List[float] = Field(default_factory=list)


class ReliabilityRequest(BaseModel):
    """Request for reliability function curves."""
    models: List[ReliabilityModelInput] = Field(..., description="Models to evaluate")
    grid_points: Optional[int] = Field(default=None, ge=2, le=5000, description="Number of grid times")


class BestFitRequest(BaseModel):
    """Request for best-distribution selection."""
    failure_times: List[float] = Field(..., description="Failure times")
    suspension_times: List[float] = Field(default_factory=list, description="Suspension times")


class ConfidenceBoundsRequest(BaseModel):
    """Request for Fisher confidence bounds on the Weibull line."""
    failure_times: List[float] = Field(..., description="Failure times")
    confidence_level: Optional[float] = Field(
        default=None,
        gt=0,
        lt=100,
        description="Two-sided confidence level as a fraction (0.9) or percent (90)"
    )


class MaintenanceOptimizeRequest(BaseModel):
    """Request for preventive maintenance interval optimization."""
    beta: float = Field(..., gt=0, description="Weibull shape")
    eta: float = Field(..., gt=0, description="Weibull scale")
    cost_preventive: float = Field(..., gt=0, description="Cost of a planned replacement")
    cost_corrective: float = Field(..., gt=0, description="Cost of a failure replacement")
    steps: int = Field(default=200, ge=10, le=10000, description="Grid steps over 0..3 eta")


class MonteCarloRequest(BaseModel):
    """Request for Monte Carlo failure simulation."""
    beta: float = Field(..., gt=0, description="Weibull shape")
    eta: float = Field(..., gt=0, description="Weibull scale")
    simulations: int = Field(default=10000, ge=1, description="Number of simulated units")
    failure_cost: float = Field(default=1.0, ge=0, description="Cost per failure")
    bin_count: int = Field(default=20, ge=1, le=500, description="Histogram bins")
    seed: Optional[int] = Field(default=None, description="Random seed for reproducibility")
    include_failure_times: bool = Field(default=False, description="Return every simulated failure time")
