"""
Log-logistic distribution.

Equation:
    R(t) = 1 / (1 + (t/α)^β)
    f(t) = (β/t) · u / (1 + u)²,  u = (t/α)^β

Where:
    α: Scale parameter (median life)
    β: Shape parameter

Log-logistic paper: x = ln(t), y = ln(F/(1-F)) = β·ln(t) - β·ln(α).
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple
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


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoglogisticParameters(DistributionParameters):
    """Log-logistic scale (alpha) and shape (beta)."""
    alpha: float
    beta: float

    distribution = Distribution.LOGLOGISTIC

    def to_dict(self) -> Dict[str, float]:
        return {"alpha": self.alpha, "beta": self.beta}

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> "LoglogisticParameters":
        return cls(alpha=float(values["alpha"]), beta=float(values["beta"]))

    def is_valid(self) -> bool:
        return finite_values(self.alpha, self.beta) and self.alpha > 0 and self.beta > 0


class LoglogisticDistribution(LifeDistributionBase):
    """Log-logistic lifetime distribution (hazard rises then falls for β > 1)."""

    distribution = Distribution.LOGLOGISTIC
    parameter_class = LoglogisticParameters

    @staticmethod
    def _log_odds(time: float, params: LoglogisticParameters) -> float:
        # u = β·ln(t/α) is the log-odds of failure by time t
        return params.beta * math.log(time / params.alpha)

    def linearize(self, time: float, prob: float) -> Tuple[float, float]:
        try:
            return math.log(time), math.log(prob / (1.0 - prob))
        except (ValueError, ZeroDivisionError):
            return math.nan, math.nan

    def parameters_from_line(
        self,
        slope: float,
        intercept: float
    ) -> Optional[LoglogisticParameters]:
        if slope == 0:
            return None
        try:
            alpha = math.exp(-intercept / slope)
        except OverflowError:
            return None
        return LoglogisticParameters(alpha=alpha, beta=slope)

    def reliability(self, time: float, params: LoglogisticParameters) -> float:
        return float(special.expit(-self._log_odds(time, params)))

    def pdf(self, time: float, params: LoglogisticParameters) -> float:
        u = self._log_odds(time, params)
        return float((params.beta / time) * special.expit(u) * special.expit(-u))

    def log_pdf(self, time: float, params: LoglogisticParameters) -> float:
        u = self._log_odds(time, params)
        return math.log(params.beta / time) + u - 2.0 * float(np.logaddexp(0.0, u))

    def log_reliability(self, time: float, params: LoglogisticParameters) -> float:
        return -float(np.logaddexp(0.0, self._log_odds(time, params)))

    def get_equation(self) -> str:
        return "R(t) = 1 / (1 + (t/α)^β)"
