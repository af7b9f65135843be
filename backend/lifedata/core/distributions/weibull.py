"""
Two-parameter Weibull distribution.

Equation:
    R(t) = exp(-(t/η)^β)
    f(t) = (β/η)(t/η)^(β-1) · R(t)

Where:
    β: Shape parameter (slope on Weibull paper)
    η: Scale parameter (characteristic life, 63.2% failed)

Weibull paper: x = ln(t), y = ln(ln(1/(1-F))), so that y = β·x - β·ln(η).
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
class WeibullParameters(DistributionParameters):
    """Weibull shape (beta) and scale (eta)."""
    beta: float
    eta: float

    distribution = Distribution.WEIBULL

    def to_dict(self) -> Dict[str, float]:
        return {"beta": self.beta, "eta": self.eta}

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> "WeibullParameters":
        return cls(beta=float(values["beta"]), eta=float(values["eta"]))

    def is_valid(self) -> bool:
        return finite_values(self.beta, self.eta) and self.beta > 0 and self.eta > 0


class WeibullDistribution(LifeDistributionBase):
    """
    Weibull lifetime distribution.

    Typical values:
        β < 1: early-life (infant mortality) failures
        β ≈ 1: random failures, constant hazard
        β > 1: wear-out failures
    """

    distribution = Distribution.WEIBULL
    parameter_class = WeibullParameters

    def linearize(self, time: float, prob: float) -> Tuple[float, float]:
        try:
            return math.log(time), math.log(math.log(1.0 / (1.0 - prob)))
        except (ValueError, ZeroDivisionError):
            return math.nan, math.nan

    def parameters_from_line(
        self,
        slope: float,
        intercept: float
    ) -> Optional[WeibullParameters]:
        if slope == 0:
            return None
        try:
            eta = math.exp(-intercept / slope)
        except OverflowError:
            return None
        return WeibullParameters(beta=slope, eta=eta)

    @staticmethod
    def _scaled_power(time: float, params: WeibullParameters, exponent: float) -> float:
        """(t/η)^exponent, saturating to inf instead of raising."""
        with np.errstate(over="ignore"):
            return float(np.power(time / params.eta, exponent))

    def reliability(self, time: float, params: WeibullParameters) -> float:
        return math.exp(-self._scaled_power(time, params, params.beta))

    def pdf(self, time: float, params: WeibullParameters) -> float:
        if time <= 0:
            return (
                (params.beta / params.eta)
                * (time / params.eta) ** (params.beta - 1)
            )
        return math.exp(self.log_pdf(time, params))

    def log_pdf(self, time: float, params: WeibullParameters) -> float:
        z = math.log(time / params.eta)
        return (
            math.log(params.beta / params.eta)
            + (params.beta - 1) * z
            - self._scaled_power(time, params, params.beta)
        )

    def log_reliability(self, time: float, params: WeibullParameters) -> float:
        return -self._scaled_power(time, params, params.beta)

    def get_equation(self) -> str:
        return "R(t) = exp(-(t/η)^β)"
