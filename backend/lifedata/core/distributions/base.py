"""
Abstract base class for all lifetime distribution families.

Every family supported by the estimation engine inherits from
LifeDistributionBase and provides its linearizing transform for rank
regression, the back-transform from a regression line to parameters, its
closed-form reliability functions and its censored log-likelihood.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple, Type
import logging
import math


logger = logging.getLogger(__name__)


# Floor applied to R(t) when it is used as a denominator
RELIABILITY_FLOOR = 1e-9


class Distribution(str, Enum):
    """Supported lifetime distribution families."""
    WEIBULL = "Weibull"
    NORMAL = "Normal"
    LOGNORMAL = "Lognormal"
    EXPONENTIAL = "Exponential"
    LOGLOGISTIC = "Loglogistic"
    GUMBEL = "Gumbel"

    @classmethod
    def parse(cls, value: Any) -> "Distribution":
        """Resolve a Distribution from an enum member or a name (any case)."""
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        for member in cls:
            if member.value.lower() == text or member.name.lower() == text:
                return member
        available = ", ".join(member.value for member in cls)
        raise ValueError(
            f"Unknown distribution: '{value}'. "
            f"Available distributions: {available}"
        )


class DistributionParameters:
    """Marker base for the per-family parameter dataclasses."""

    distribution: Distribution

    def to_dict(self) -> Dict[str, float]:
        raise NotImplementedError

    def is_valid(self) -> bool:
        """True when every parameter is finite and the scale-like ones are > 0."""
        raise NotImplementedError


def finite_values(*values: float) -> bool:
    return all(value is not None and math.isfinite(value) for value in values)


class LifeDistributionBase(ABC):
    """
    Abstract base class for lifetime distribution families.

    Concrete families implement the transform used on probability paper,
    the parameter back-transform and the closed-form R(t) and f(t). The
    remaining reliability functions derive from these two.
    """

    distribution: Distribution
    parameter_class: Type[DistributionParameters]

    # ---- rank regression ------------------------------------------------

    @abstractmethod
    def linearize(self, time: float, prob: float) -> Tuple[float, float]:
        """
        Map (time, F) to the (x, y) coordinates of this family's paper.

        Results may be non-finite; callers discard those points.
        """
        pass

    @abstractmethod
    def parameters_from_line(
        self,
        slope: float,
        intercept: float
    ) -> Optional[DistributionParameters]:
        """
        Convert a regression line on this family's paper into parameters.

        Returns:
            Parameters, or None when the line cannot be back-transformed.
        """
        pass

    def parameters_from_dict(
        self,
        values: Mapping[str, Any]
    ) -> Optional[DistributionParameters]:
        """
        Build parameters from a plain mapping (e.g. a manual override).

        Returns None when a required field is missing or not numeric.
        """
        try:
            return self.parameter_class.from_dict(values)
        except (KeyError, TypeError, ValueError):
            return None

    # ---- closed-form functions -----------------------------------------

    @abstractmethod
    def reliability(self, time: float, params: DistributionParameters) -> float:
        """R(t) = P(T > t)."""
        pass

    @abstractmethod
    def pdf(self, time: float, params: DistributionParameters) -> float:
        """Probability density f(t)."""
        pass

    def cdf(self, time: float, params: DistributionParameters) -> float:
        """F(t) = 1 - R(t)."""
        return 1.0 - self.reliability(time, params)

    def hazard(self, time: float, params: DistributionParameters) -> float:
        """Hazard rate f(t) / R(t), with R(t) floored at RELIABILITY_FLOOR."""
        r = self.reliability(time, params)
        f = self.pdf(time, params)
        return f / r if r > RELIABILITY_FLOOR else f / RELIABILITY_FLOOR

    # ---- likelihood ----------------------------------------------------

    def log_pdf(self, time: float, params: DistributionParameters) -> float:
        f = self.pdf(time, params)
        return math.log(f) if f > 0 else -math.inf

    def log_reliability(self, time: float, params: DistributionParameters) -> float:
        r = self.reliability(time, params)
        return math.log(r) if r > 0 else -math.inf

    def log_likelihood(
        self,
        params: Optional[DistributionParameters],
        failure_times: Sequence[float],
        suspension_times: Optional[Sequence[float]] = None
    ) -> Optional[float]:
        """
        Right-censored log-likelihood.

        Failures contribute ln f(t), suspensions ln R(t).

        Returns:
            The log-likelihood (possibly -inf), or None for invalid
            parameters or no failures.
        """
        if failure_times is None or len(failure_times) == 0 or not self.is_valid(params):
            return None
        try:
            total = sum(self.log_pdf(t, params) for t in failure_times)
            if suspension_times is not None:
                total += sum(self.log_reliability(t, params) for t in suspension_times)
        except (OverflowError, ValueError, ZeroDivisionError) as e:
            logger.debug(f"{self.distribution.value}: log-likelihood failed ({e})")
            return -math.inf
        if math.isnan(total):
            return -math.inf
        return float(total)

    # ---- estimation ----------------------------------------------------

    def estimate_closed_form(
        self,
        failure_times: Sequence[float],
        suspension_times: Sequence[float]
    ) -> Optional[DistributionParameters]:
        """
        Closed-form estimate used when the MLE method is requested.

        Families without one return None and are fitted numerically.
        """
        return None

    # ---- validation ----------------------------------------------------

    def is_valid(self, params: Optional[DistributionParameters]) -> bool:
        """Check that ``params`` belongs to this family and is usable."""
        return isinstance(params, self.parameter_class) and params.is_valid()

    def get_name(self) -> str:
        return self.distribution.value

    def get_equation(self) -> str:
        """
        Return R(t) as a human-readable string.

        Default implementation returns an empty string.
        """
        return ""

