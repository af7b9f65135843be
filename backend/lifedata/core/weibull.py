"""
Weibull analysis for reliability engineering.

Used to estimate the Weibull shape parameter by maximum likelihood under
right censoring, and to derive B-lives, MTTF and the failure phase
(infant mortality, useful life, wear-out) from fitted parameters.

Reference:
- Abernethy, The New Weibull Handbook, 5th ed.
- Censored Weibull likelihood equations (profile score in beta)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence
import logging
import math

import numpy as np

from lifedata.core.distributions.weibull import WeibullParameters


logger = logging.getLogger(__name__)


# Newton-Raphson settings for the shape parameter
MLE_INITIAL_BETA = 1.0
MLE_MAX_ITERATIONS = 100
MLE_TOLERANCE = 1e-7
MLE_MIN_DERIVATIVE = 1e-10
MLE_MIN_BETA = 0.01


@dataclass
class WeibullMLESolution:
    """Outcome of the Newton-Raphson shape iteration.

    Attributes:
        parameters: Fitted shape (beta) and scale (eta).
        iterations: Number of iterations performed.
        converged: True if successive beta values met the tolerance.
    """
    parameters: WeibullParameters
    iterations: int
    converged: bool


@dataclass
class WeibullSummary:
    """Life metrics derived from Weibull parameters.

    Attributes:
        b10_life: Life at 10% failure probability (90% reliability).
        b50_life: Life at 50% failure probability (median life).
        b63_life: Life at 63.2% failure probability (equals eta).
        mttf: Mean time to failure, eta * Gamma(1 + 1/beta).
        failure_phase: Bathtub-curve phase indicated by beta.
    """
    b10_life: float
    b50_life: float
    b63_life: float
    mttf: float
    failure_phase: "FailurePhase"


class FailurePhase(str, Enum):
    """Bathtub-curve region indicated by the Weibull shape."""
    INFANT_MORTALITY = "infant_mortality"
    USEFUL_LIFE = "useful_life"
    WEAR_OUT = "wear_out"


def solve_weibull_mle(
    failure_times: Sequence[float],
    suspension_times: Optional[Sequence[float]] = None,
    initial_beta: float = MLE_INITIAL_BETA,
    max_iterations: int = MLE_MAX_ITERATIONS,
    tolerance: float = MLE_TOLERANCE
) -> Optional[WeibullMLESolution]:
    """Maximum likelihood Weibull fit by Newton-Raphson on the shape.

    The profile score for beta with r failures and N = failures + suspensions
    is

        g(β) = Σ_N t^β ln t / Σ_N t^β - 1/β - (1/r) Σ_r ln t

    and its derivative

        g'(β) = [Σ_N t^β ln²t · Σ_N t^β - (Σ_N t^β ln t)²] / (Σ_N t^β)² + 1/β²

    Iteration stops when successive betas differ by less than ``tolerance``
    or when |g'| drops below 1e-10. The final beta is clamped to >= 0.01 and

        η = (Σ_N t^β / r)^(1/β)

    Times are rescaled by their maximum before iterating; beta is invariant
    under that rescaling and eta is scaled back afterwards.

    Args:
        failure_times: Failure times (> 0). At least one is required.
        suspension_times: Suspension (right-censored) times (> 0).
        initial_beta: Starting shape value.
        max_iterations: Iteration cap.
        tolerance: Convergence tolerance on successive beta values.

    Returns:
        WeibullMLESolution, or None when there are no failures or an update
        produced a non-finite or non-positive beta. Callers are expected to
        fall back to rank regression in that case.
    """
    failures = np.asarray(failure_times, dtype=float)
    if len(failures) == 0:
        return None
    suspensions = np.asarray(suspension_times if suspension_times is not None else [], dtype=float)

    all_times = np.concatenate([failures, suspensions])
    t_max = float(np.max(all_times))
    scaled = all_times / t_max
    log_all = np.log(scaled)
    mean_log_failures = float(np.mean(np.log(failures / t_max)))
    n_failures = len(failures)

    beta = initial_beta
    converged = False
    iterations = 0

    with np.errstate(over="ignore", invalid="ignore", divide="ignore"):
        for iterations in range(1, max_iterations + 1):
            t_beta = scaled ** beta
            s0 = np.sum(t_beta)
            s1 = np.sum(t_beta * log_all)
            s2 = np.sum(t_beta * log_all ** 2)

            score = s1 / s0 - 1.0 / beta - mean_log_failures
            score_prime = (s2 * s0 - s1 ** 2) / s0 ** 2 + 1.0 / beta ** 2

            if abs(score_prime) < MLE_MIN_DERIVATIVE:
                logger.debug(f"Weibull MLE: derivative vanished at beta={beta:.6g}")
                break

            new_beta = beta - score / score_prime

            if not np.isfinite(new_beta) or new_beta <= 0:
                logger.debug(
                    f"Weibull MLE: abandoned at iteration {iterations} "
                    f"(beta {beta:.6g} -> {new_beta})"
                )
                return None

            if abs(new_beta - beta) < tolerance:
                beta = float(new_beta)
                converged = True
                break

            beta = float(new_beta)

        beta = max(beta, MLE_MIN_BETA)
        eta = t_max * (np.sum(scaled ** beta) / n_failures) ** (1.0 / beta)

    if not np.isfinite(eta) or eta <= 0:
        logger.debug(f"Weibull MLE: invalid scale {eta} for beta={beta:.6g}")
        return None

    logger.debug(
        f"Weibull MLE: beta={beta:.4f}, eta={eta:.4g} "
        f"({iterations} iterations, converged={converged})"
    )

    return WeibullMLESolution(
        parameters=WeibullParameters(beta=float(beta), eta=float(eta)),
        iterations=iterations,
        converged=converged
    )


def calculate_b_life(shape: float, scale: float, percentile: float) -> float:
    """Calculate life at given failure probability.

    The B(P) life is the time at which P percent of the population
    will have failed. For example, B10 is the time at 10% failures
    (90% reliability).

    Formula: B(P) = eta × [-ln(1-P)]^(1/beta)

    Args:
        shape: Weibull shape parameter (beta, slope). Must be positive.
        scale: Weibull scale parameter (eta, characteristic life). Must be positive.
        percentile: Failure probability (0-1). e.g., 0.1 for B10, 0.5 for B50.

    Returns:
        Life at specified percentile (same units as scale parameter).

    Raises:
        ValueError: If shape or scale are non-positive, or percentile out of range.

    Examples:
        >>> calculate_b_life(shape=2.0, scale=1000, percentile=0.1)
        316.23  # B10 life
    """
    if shape <= 0:
        raise ValueError("Shape parameter must be positive")
    if scale <= 0:
        raise ValueError("Scale parameter must be positive")
    if not (0 < percentile < 1):
        raise ValueError("Percentile must be between 0 and 1")

    # B(P) = eta × [-ln(1-P)]^(1/beta)
    return scale * (-math.log(1 - percentile)) ** (1 / shape)


def calculate_mttf(shape: float, scale: float) -> float:
    """Mean time to failure, eta * Gamma(1 + 1/beta).

    Raises:
        ValueError: If shape or scale are non-positive.
    """
    if shape <= 0:
        raise ValueError("Shape parameter must be positive")
    if scale <= 0:
        raise ValueError("Scale parameter must be positive")
    return scale * math.gamma(1 + 1 / shape)


def classify_failure_phase(shape: float) -> FailurePhase:
    """Map a Weibull shape onto the bathtub curve.

    beta < 0.95 is read as infant mortality, 0.95-1.05 as useful life
    (constant hazard) and anything above as wear-out.
    """
    if shape < 0.95:
        return FailurePhase.INFANT_MORTALITY
    if shape <= 1.05:
        return FailurePhase.USEFUL_LIFE
    return FailurePhase.WEAR_OUT


def summarize_weibull(params: WeibullParameters) -> Optional[WeibullSummary]:
    """B10/B50/B63.2 lives, MTTF and failure phase for fitted parameters.

    Returns None for invalid parameters.
    """
    if not params.is_valid():
        return None
    try:
        mttf = calculate_mttf(params.beta, params.eta)
    except OverflowError:
        mttf = math.inf
    return WeibullSummary(
        b10_life=calculate_b_life(params.beta, params.eta, 0.1),
        b50_life=calculate_b_life(params.beta, params.eta, 0.5),
        b63_life=params.eta,
        mttf=mttf,
        failure_phase=classify_failure_phase(params.beta)
    )
