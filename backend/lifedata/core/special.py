"""
Special-function primitives used by the estimation engine.

Thin, edge-case aware wrappers around scipy.special for the error function
and the normal distribution. The degenerate cases (stdDev <= 0, p outside
(0, 1)) follow the dashboard's conventions rather than raising.
"""

import math

from scipy import special


def erf(x: float) -> float:
    """Error function erf(x)."""
    return float(special.erf(x))


def inv_erf(x: float) -> float:
    """Inverse error function for x in (-1, 1).

    Returns -inf at x <= -1 and +inf at x >= 1.

    Examples:
        >>> round(inv_erf(erf(0.5)), 12)
        0.5
    """
    if x <= -1.0:
        return -math.inf
    if x >= 1.0:
        return math.inf
    return float(special.erfinv(x))


def inv_normal_cdf(p: float) -> float:
    """Inverse of the standard normal CDF.

    Args:
        p: Cumulative probability.

    Returns:
        z such that Phi(z) = p; -inf for p <= 0 and +inf for p >= 1.
    """
    if p <= 0.0:
        return -math.inf
    if p >= 1.0:
        return math.inf
    return float(special.ndtri(p))


def normal_cdf(x: float, mean: float = 0.0, std_dev: float = 1.0) -> float:
    """Normal cumulative distribution function.

    A non-positive std_dev is treated as a point mass at ``mean``: the CDF
    becomes a Heaviside step (0 below the mean, 1 at or above it).
    """
    if std_dev <= 0:
        return 0.0 if x < mean else 1.0
    return 0.5 * (1.0 + erf((x - mean) / (std_dev * math.sqrt(2.0))))


def normal_pdf(x: float, mean: float = 0.0, std_dev: float = 1.0) -> float:
    """Normal probability density function.

    A non-positive std_dev is treated as a point mass at ``mean``: the
    density is +inf at the mean and 0 everywhere else.
    """
    if std_dev <= 0:
        return math.inf if x == mean else 0.0
    z = (x - mean) / std_dev
    return math.exp(-0.5 * z * z) / (std_dev * math.sqrt(2.0 * math.pi))
