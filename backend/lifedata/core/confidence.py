"""
Fisher-matrix confidence bounds on the Weibull probability-plot line.

The bounds are built on the linearized statistic

    Y = β·ln(t) - β·ln(η)

using large-sample variance approximations for a rank-regression Weibull
fit. Its variance follows from the delta method:

    Var(Y) = (Y/β)²·Var(β) + (β/η)²·Var(η) - 2·(Y/β)·(β/η)·Cov(β, η)

and the bounds are Y ± z·sqrt(Var(Y)) with z the two-sided normal quantile.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple
import logging
import math

import numpy as np

from lifedata.core.distributions import Distribution
from lifedata.core.fitting import estimate_by_rank_regression
from lifedata.core.ranks import clean_times
from lifedata.core.regression import EstimationMethod
from lifedata.core.special import inv_normal_cdf


logger = logging.getLogger(__name__)


# Empirical large-sample coefficients for Var(β), Var(η) and Cov(β, η)
VAR_BETA_COEFFICIENT = 0.608
VAR_ETA_COEFFICIENT = 0.370
COV_COEFFICIENT = 0.255

BOUND_POINTS = 100


@dataclass
class ConfidenceBounds:
    """Confidence bounds on the Weibull line in (ln t, Y) coordinates.

    Attributes:
        lower: Lower bound points (x, y).
        upper: Upper bound points (x, y).
        median: Fitted line at the same x values.
        points: Plotted failures (x, y).
        beta: Fitted shape, None when no fit was possible.
        eta: Fitted scale, None when no fit was possible.
        confidence_level: Confidence level as a fraction.
    """
    lower: List[Tuple[float, float]] = field(default_factory=list)
    upper: List[Tuple[float, float]] = field(default_factory=list)
    median: List[Tuple[float, float]] = field(default_factory=list)
    points: List[Tuple[float, float]] = field(default_factory=list)
    beta: Optional[float] = None
    eta: Optional[float] = None
    confidence_level: float = 0.9

    def to_dict(self) -> Dict[str, Any]:
        def as_points(values):
            return [{"x": x, "y": y} for x, y in values]

        return {
            "lower": as_points(self.lower),
            "upper": as_points(self.upper),
            "median": as_points(self.median),
            "points": as_points(self.points),
            "beta": self.beta,
            "eta": self.eta,
            "confidenceLevel": self.confidence_level,
        }


def normalize_confidence_level(confidence_level: float) -> float:
    """Accept a fraction (0.9) or a percentage (90) and return a fraction.

    Values above 1 are read as percentages. Exactly 1 is rejected since it
    could mean either 100% or 1%.

    Raises:
        ValueError: If the level is not strictly between 0 and 1 (or 0 and 100),
            or is exactly 1.
    """
    level = float(confidence_level)
    if level == 1:
        raise ValueError("Confidence level of 1 is ambiguous; give a fraction below 1 or a percentage")
    if level > 1:
        level = level / 100.0
    if not (0 < level < 1):
        raise ValueError("Confidence level must be between 0 and 1 (or 0 and 100 percent)")
    return level


def calculate_fisher_confidence_bounds(
    failure_times: Sequence[float],
    confidence_level: float = 0.9,
    n_points: int = BOUND_POINTS
) -> ConfidenceBounds:
    """Fisher-matrix confidence bounds for a Weibull rank-regression fit.

    With n failures and SRM estimates β, η:

        Var(β) = 0.608·β²/n
        Var(η) = 0.370·η²/(n·β²)
        Cov(β, η) = 0.255·β·η/n

    Bounds are evaluated at ``n_points`` values spanning the observed
    ln(t) range. Points where Var(Y) < 0 are skipped.

    Args:
        failure_times: Failure times (> 0).
        confidence_level: Two-sided confidence level, e.g. 0.9 or 90.
        n_points: Number of x values at which bounds are computed.

    Returns:
        ConfidenceBounds. When fewer than two usable failures remain or the
        fit fails, the bound lists are empty and beta/eta are None.

    Raises:
        ValueError: If the confidence level is out of range.
    """
    level = normalize_confidence_level(confidence_level)
    failures = clean_times(failure_times)

    result = estimate_by_rank_regression(Distribution.WEIBULL, failures, None, EstimationMethod.SRM)
    params = result.parameters
    if params is None or not params.is_valid():
        logger.debug("Fisher bounds: no valid Weibull fit")
        return ConfidenceBounds(confidence_level=level)

    beta, eta = params.beta, params.eta
    n = len(failures)
    z = inv_normal_cdf(1 - (1 - level) / 2)

    var_beta = VAR_BETA_COEFFICIENT * beta ** 2 / n
    var_eta = VAR_ETA_COEFFICIENT * eta ** 2 / (n * beta ** 2)
    cov = COV_COEFFICIENT * beta * eta / n

    log_times = np.log(failures)
    x_values = np.linspace(float(np.min(log_times)), float(np.max(log_times)), n_points)
    log_eta = math.log(eta)

    bounds = ConfidenceBounds(beta=beta, eta=eta, confidence_level=level)
    bounds.points = [(p.x, p.y) for p in result.plot_data.points]

    for x in x_values:
        x = float(x)
        y = beta * x - beta * log_eta
        dy_dbeta = y / beta
        dy_deta = -beta / eta
        var_y = (
            dy_dbeta ** 2 * var_beta
            + dy_deta ** 2 * var_eta
            + 2 * dy_dbeta * dy_deta * cov
        )
        if var_y < 0:
            continue
        half_width = z * math.sqrt(var_y)
        bounds.median.append((x, y))
        bounds.lower.append((x, y - half_width))
        bounds.upper.append((x, y + half_width))

    logger.debug(
        f"Fisher bounds: beta={beta:.4f}, eta={eta:.4g}, CL={level:.2f}, "
        f"{len(bounds.lower)}/{n_points} points"
    )
    return bounds
