"""
Gumbel (largest extreme value) distribution.

Equation:
    F(t) = exp(-exp(-(t - μ)/σ))
    f(t) = (1/σ) · exp(-z - exp(-z)),  z = (t - μ)/σ

Gumbel paper: x = t, y = -ln(-ln F) = t/σ - μ/σ.
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple
import logging
import math

import numpy as np

from lifedata.core.distributions.base import (
    Distribution,
    DistributionParameters,
    LifeDistributionBase,
    finite_values,
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GumbelParameters(DistributionParameters):
    """Gumbel location (mu) and scale (sigma)."""
    mu: float
    sigma: float

    distribution = Distribution.GUMBEL

    def to_dict(self) -> Dict[str, float]:
        return {"mu": self.mu, "sigma": self.sigma}

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> "GumbelParameters":
        return cls(mu=float(values["mu"]), sigma=float(values["sigma"]))

    def is_valid(self) -> bool:
        return finite_values(self.mu, self.sigma) and self.sigma > 0


class GumbelDistribution(LifeDistributionBase):
    """Gumbel lifetime distribution."""

    distribution = Distribution.GUMBEL
    parameter_class = GumbelParameters

    @staticmethod
    def _exp_neg_z(time: float, params: GumbelParameters) -> float:
        z = (time - params.mu) / params.sigma
        with np.errstate(over="ignore"):
            return float(np.exp(-z))

    def linearize(self, time: float, prob: float) -> Tuple[float, float]:
        try:
            return time, -math.log(-math.log(prob))
        except (ValueError, ZeroDivisionError):
            return math.nan, math.nan

    def parameters_from_line(
        self,
        slope: float,
        intercept: float
    ) -> Optional[GumbelParameters]:
        if slope == 0:
            return None
        return GumbelParameters(mu=-intercept / slope, sigma=1.0 / slope)

    def reliability(self, time: float, params: GumbelParameters) -> float:
        w = self._exp_neg_z(time, params)
        return float(-np.expm1(-w))

    def cdf(self, time: float, params: GumbelParameters) -> float:
        return float(np.exp(-self._exp_neg_z(time, params)))

    def pdf(self, time: float, params: GumbelParameters) -> float:
        w = self._exp_neg_z(time, params)
        if not math.isfinite(w):
            return 0.0
        return w * math.exp(-w) / params.sigma

    def log_pdf(self, time: float, params: GumbelParameters) -> float:
        z = (time - params.mu) / params.sigma
        w = self._exp_neg_z(time, params)
        return -math.log(params.sigma) - z - w

    def log_reliability(self, time: float, params: GumbelParameters) -> float:
        r = self.reliability(time, params)
        return math.log(r) if r > 0 else -math.inf

    def get_equation(self) -> str:
        return "F(t) = exp(-exp(-(t - μ)/σ))"
