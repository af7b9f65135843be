"""
Normal distribution.

Equation:
    F(t) = Φ((t - μ)/σ)
    f(t) = φ((t - μ)/σ) / σ

Normal paper: x = t, y = Φ⁻¹(F), so that y = t/σ - μ/σ.
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple
import logging
import math

import numpy as np
from scipy import special

from lifedata.core.distributions.base import (
    Distribution,
    DistributionParameters,
    LifeDistributionBase,
    finite_values,
)
from lifedata.core.special import inv_normal_cdf, normal_cdf, normal_pdf


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NormalParameters(DistributionParameters):
    """Normal mean and standard deviation."""
    mean: float
    std_dev: float

    distribution = Distribution.NORMAL

    def to_dict(self) -> Dict[str, float]:
        return {"mean": self.mean, "stdDev": self.std_dev}

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> "NormalParameters":
        std_dev = values["stdDev"] if "stdDev" in values else values["std_dev"]
        return cls(mean=float(values["mean"]), std_dev=float(std_dev))

    def is_valid(self) -> bool:
        return finite_values(self.mean, self.std_dev) and self.std_dev > 0


def sample_mean_std(values: Sequence[float]) -> Tuple[float, float]:
    """Sample mean and unbiased standard deviation.

    Uses Bessel's correction (n - 1); falls back to n when n = 1.
    """
    data = np.asarray(values, dtype=float)
    n = len(data)
    mean = float(np.mean(data))
    ddof = 1 if n > 1 else 0
    return mean, float(np.std(data, ddof=ddof))


class NormalDistribution(LifeDistributionBase):
    """Normal lifetime distribution (wear-out around a mean life)."""

    distribution = Distribution.NORMAL
    parameter_class = NormalParameters

    def linearize(self, time: float, prob: float) -> Tuple[float, float]:
        return time, inv_normal_cdf(prob)

    def parameters_from_line(
        self,
        slope: float,
        intercept: float
    ) -> Optional[NormalParameters]:
        if slope == 0:
            return None
        return NormalParameters(mean=-intercept / slope, std_dev=1.0 / slope)

    def reliability(self, time: float, params: NormalParameters) -> float:
        return 1.0 - normal_cdf(time, params.mean, params.std_dev)

    def cdf(self, time: float, params: NormalParameters) -> float:
        return normal_cdf(time, params.mean, params.std_dev)

    def pdf(self, time: float, params: NormalParameters) -> float:
        return normal_pdf(time, params.mean, params.std_dev)

    def log_pdf(self, time: float, params: NormalParameters) -> float:
        z = (time - params.mean) / params.std_dev
        return -0.5 * z * z - math.log(params.std_dev * math.sqrt(2.0 * math.pi))

    def log_reliability(self, time: float, params: NormalParameters) -> float:
        z = (time - params.mean) / params.std_dev
        return float(special.log_ndtr(-z))

    def estimate_closed_form(
        self,
        failure_times: Sequence[float],
        suspension_times: Sequence[float]
    ) -> Optional[NormalParameters]:
        if len(failure_times) < 1:
            return None
        mean, std_dev = sample_mean_std(failure_times)
        return NormalParameters(mean=mean, std_dev=std_dev)

    def get_equation(self) -> str:
        return "F(t) = Φ((t - μ)/σ)"
