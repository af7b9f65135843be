"""
Ordinary least-squares regression on linearized probability-plot points.

Rank regression fits a straight line through the (x, y) points obtained by
applying a distribution's linearizing transform to (time, median rank)
pairs. Two variants are supported:

- SRM (rank regression on Y): regress y on x.
- RRX (rank regression on X): regress x on y, then invert the line so it is
  again expressed as y = slope * x + intercept.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Sequence

import numpy as np


# Relative tolerance below which a sum of squares is treated as zero
DEGENERATE_TOLERANCE = 1e-12


class EstimationMethod(str, Enum):
    """Parameter estimation method."""
    SRM = "SRM"
    RRX = "RRX"
    MLE = "MLE"

    @classmethod
    def parse(cls, value: Any) -> "EstimationMethod":
        """Resolve a method from an enum member or its name (any case)."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            available = ", ".join(member.value for member in cls)
            raise ValueError(
                f"Unknown estimation method: '{value}'. "
                f"Available methods: {available}"
            ) from None


@dataclass
class RegressionLine:
    """Straight line y = slope * x + intercept with its goodness of fit."""
    slope: float
    intercept: float
    r_squared: float

    def predict(self, x: float) -> float:
        return self.slope * x + self.intercept


def _is_degenerate(sum_sq: float, scale: float) -> bool:
    return abs(sum_sq) <= DEGENERATE_TOLERANCE * max(scale, 1.0)


def linear_regression(
    x_values: Sequence[float],
    y_values: Sequence[float],
    method: EstimationMethod = EstimationMethod.SRM
) -> Optional[RegressionLine]:
    """Fit a least-squares line through (x, y) points.

    Args:
        x_values: Independent variable (transformed time).
        y_values: Dependent variable (transformed probability).
        method: SRM regresses y on x; RRX regresses x on y and inverts the
            result (slope = 1/b, intercept = -a/b).

    Returns:
        RegressionLine, or None when fewer than 2 points are given or the
        relevant sum of squares is ~0 (constant data).
    """
    x = np.asarray(x_values, dtype=float)
    y = np.asarray(y_values, dtype=float)
    n = len(x)
    if n < 2 or len(y) != n:
        return None

    sum_x = np.sum(x)
    sum_y = np.sum(y)
    sum_xy = np.sum(x * y)
    sum_xx = np.sum(x * x)
    sum_yy = np.sum(y * y)

    s_xy = n * sum_xy - sum_x * sum_y
    s_xx = n * sum_xx - sum_x * sum_x
    s_yy = n * sum_yy - sum_y * sum_y

    if method == EstimationMethod.RRX:
        if _is_degenerate(s_yy, n * sum_yy):
            return None
        b = s_xy / s_yy
        if _is_degenerate(b, 0.0):
            return None
        a = (sum_x - b * sum_y) / n
        slope = 1.0 / b
        intercept = -a / b
    else:
        if _is_degenerate(s_xx, n * sum_xx):
            return None
        slope = s_xy / s_xx
        intercept = (sum_y - slope * sum_x) / n

    denominator = s_xx * s_yy
    r_squared = (s_xy * s_xy) / denominator if denominator > 0 else 0.0
    r_squared = float(min(max(r_squared, 0.0), 1.0))

    if not (np.isfinite(slope) and np.isfinite(intercept)):
        return None

    return RegressionLine(
        slope=float(slope),
        intercept=float(intercept),
        r_squared=r_squared
    )
