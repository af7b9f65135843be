"""
Exponential distribution (constant failure rate).

Equation:
    R(t) = exp(-λt)
    f(t) = λ · exp(-λt)
    h(t) = λ

Exponential paper: x = t, y = ln(1/(1-F)), a line of slope λ.
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple
import logging
import math

from lifedata.core.distributions.base import (
    Distribution,
    DistributionParameters,
    LifeDistributionBase,
    finite_values,
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExponentialParameters(DistributionParameters):
    """Exponential failure rate lambda."""
    rate: float

    distribution = Distribution.EXPONENTIAL

    def to_dict(self) -> Dict[str, float]:
        return {"lambda": self.rate}

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> "ExponentialParameters":
        rate = values["lambda"] if "lambda" in values else values["rate"]
        return cls(rate=float(rate))

    def is_valid(self) -> bool:
        return finite_values(self.rate) and self.rate > 0


class ExponentialDistribution(LifeDistributionBase):
    """Exponential lifetime distribution (random failures, useful life)."""

    distribution = Distribution.EXPONENTIAL
    parameter_class = ExponentialParameters

    def linearize(self, time: float, prob: float) -> Tuple[float, float]:
        try:
            return time, math.log(1.0 / (1.0 - prob))
        except (ValueError, ZeroDivisionError):
            return math.nan, math.nan

    def parameters_from_line(
        self,
        slope: float,
        intercept: float
    ) -> Optional[ExponentialParameters]:
        if slope == 0:
            return None
        return ExponentialParameters(rate=slope)

    def reliability(self, time: float, params: ExponentialParameters) -> float:
        return math.exp(-params.rate * time)

    def pdf(self, time: float, params: ExponentialParameters) -> float:
        return params.rate * math.exp(-params.rate * time)

    def hazard(self, time: float, params: ExponentialParameters) -> float:
        return params.rate

    def log_pdf(self, time: float, params: ExponentialParameters) -> float:
        return math.log(params.rate) - params.rate * time

    def log_reliability(self, time: float, params: ExponentialParameters) -> float:
        return -params.rate * time

    def estimate_closed_form(
        self,
        failure_times: Sequence[float],
        suspension_times: Sequence[float]
    ) -> Optional[ExponentialParameters]:
        """
        λ = 1 / mean of all observed times, failures and suspensions alike.
        """
        if len(failure_times) < 1:
            return None
        all_times = list(failure_times) + list(suspension_times or [])
        mean = sum(all_times) / len(all_times)
        if mean <= 0:
            return None
        return ExponentialParameters(rate=1.0 / mean)

    def get_equation(self) -> str:
        return "R(t) = exp(-λt)"
