"""
Lognormal distribution.

The logarithm of the life is normally distributed with mean μ and
standard deviation σ (both in log-time units).

Equation:
    F(t) = Φ((ln t - μ)/σ)
    f(t) = φ((ln t - μ)/σ) / (σ · t)

Lognormal paper: x = ln(t), y = Φ⁻¹(F).
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple
import logging
import math

from scipy import special

from lifedata.core.distributions.base import (
    Distribution,
    DistributionParameters,
    LifeDistributionBase,
    finite_values,
)
from lifedata.core.distributions.normal import sample_mean_std
from lifedata.core.special import inv_normal_cdf, normal_cdf, normal_pdf


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LognormalParameters(DistributionParameters):
    """Mean and standard deviation of ln(t)."""
    mean: float
    std_dev: float

    distribution = Distribution.LOGNORMAL

    def to_dict(self) -> Dict[str, float]:
        return {"mean": self.mean, "stdDev": self.std_dev}

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> "LognormalParameters":
        std_dev = values["stdDev"] if "stdDev" in values else values["std_dev"]
        return cls(mean=float(values["mean"]), std_dev=float(std_dev))

    def is_valid(self) -> bool:
        return finite_values(self.mean, self.std_dev) and self.std_dev > 0


class LognormalDistribution(LifeDistributionBase):
    """Lognormal lifetime distribution (fatigue, degradation processes)."""

    distribution = Distribution.LOGNORMAL
    parameter_class = LognormalParameters

    def linearize(self, time: float, prob: float) -> Tuple[float, float]:
        if time <= 0:
            return math.nan, math.nan
        return math.log(time), inv_normal_cdf(prob)

    def parameters_from_line(
        self,
        slope: float,
        intercept: float
    ) -> Optional[LognormalParameters]:
        if slope == 0:
            return None
        return LognormalParameters(mean=-intercept / slope, std_dev=1.0 / slope)

    def reliability(self, time: float, params: LognormalParameters) -> float:
        return 1.0 - self.cdf(time, params)

    def cdf(self, time: float, params: LognormalParameters) -> float:
        if time <= 0:
            return 0.0
        return normal_cdf(math.log(time), params.mean, params.std_dev)

    def pdf(self, time: float, params: LognormalParameters) -> float:
        if time <= 0:
            return 0.0
        # change of variables from ln(t)
        return normal_pdf(math.log(time), params.mean, params.std_dev) / time

    def log_pdf(self, time: float, params: LognormalParameters) -> float:
        log_t = math.log(time)
        z = (log_t - params.mean) / params.std_dev
        return (
            -0.5 * z * z
            - math.log(params.std_dev * math.sqrt(2.0 * math.pi))
            - log_t
        )

    def log_reliability(self, time: float, params: LognormalParameters) -> float:
        z = (math.log(time) - params.mean) / params.std_dev
        return float(special.log_ndtr(-z))

    def estimate_closed_form(
        self,
        failure_times: Sequence[float],
        suspension_times: Sequence[float]
    ) -> Optional[LognormalParameters]:
        log_times = [math.log(t) for t in failure_times if t > 0]
        if not log_times:
            return None
        mean, std_dev = sample_mean_std(log_times)
        return LognormalParameters(mean=mean, std_dev=std_dev)

    def get_equation(self) -> str:
        return "F(t) = Φ((ln t - μ)/σ)"
