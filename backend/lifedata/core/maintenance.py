"""
Maintenance planning tools built on a fitted Weibull model.

This module provides:
- Age-replacement optimization: the preventive replacement interval that
  minimises long-run cost per unit time.
- Monte Carlo simulation of Weibull failure times with a histogram of the
  simulated lives.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any
import logging
import math

import numpy as np


logger = logging.getLogger(__name__)


class MaintenanceOptimizationError(Exception):
    """Exception raised when no finite maintenance cost can be computed."""
    pass


@dataclass
class CostPoint:
    """Cost rate of replacing preventively at age ``time``."""
    time: float
    cost: float


@dataclass
class MaintenanceOptimizationResult:
    """Age-replacement optimization result.

    Attributes:
        cost_curve: Cost per unit time for each candidate interval.
        optimal_interval: Interval with the lowest cost rate.
        min_cost: Cost rate at the optimal interval.
    """
    cost_curve: List[CostPoint]
    optimal_interval: float
    min_cost: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "costCurve": [{"time": p.time, "cost": p.cost} for p in self.cost_curve],
            "optimalInterval": self.optimal_interval,
            "minCost": self.min_cost,
        }


@dataclass
class HistogramBin:
    """Simulated failures falling in [lower, upper)."""
    lower: float
    upper: float
    failures: int


@dataclass
class SimulationResult:
    """Monte Carlo simulation result.

    Attributes:
        mttf: Mean of the simulated failure times.
        total_cost: Number of simulated failures times the cost per failure.
        failure_times: Simulated failure times.
        histogram: Binned failure counts.
    """
    mttf: float
    total_cost: float
    failure_times: List[float] = field(default_factory=list)
    histogram: List[HistogramBin] = field(default_factory=list)

    def to_dict(self, include_times: bool = False) -> Dict[str, Any]:
        data = {
            "mttf": self.mttf,
            "totalCost": self.total_cost,
            "histogram": [
                {
                    "time": f"{round(b.lower)} - {round(b.upper)}",
                    "lower": b.lower,
                    "upper": b.upper,
                    "failures": b.failures,
                }
                for b in self.histogram
            ],
        }
        if include_times:
            data["failureTimes"] = self.failure_times
        return data


def _validate_weibull(beta: float, eta: float) -> None:
    if beta <= 0:
        raise ValueError("Shape parameter must be positive")
    if eta <= 0:
        raise ValueError("Scale parameter must be positive")


def optimize_preventive_maintenance(
    beta: float,
    eta: float,
    cost_preventive: float,
    cost_corrective: float,
    steps: int = 200
) -> MaintenanceOptimizationResult:
    """
    Find the age-replacement interval with the lowest cost rate.

    For a candidate interval T the long-run cost per unit time is

        C(T) = (Cp·R(T) + Cu·F(T)) / ∫₀ᵀ R(t) dt

    The grid spans 0 to 3η in ``steps`` steps and the integral uses the
    trapezoidal rule. Candidates below t = 1 or with a vanishing integral
    are ignored.

    Args:
        beta: Weibull shape parameter.
        eta: Weibull scale parameter.
        cost_preventive: Cost of a planned replacement (Cp).
        cost_corrective: Cost of a failure replacement (Cu).
        steps: Number of grid intervals.

    Returns:
        MaintenanceOptimizationResult with the cost curve and optimum.

    Raises:
        ValueError: If parameters are invalid.
        MaintenanceOptimizationError: If no finite cost could be computed.

    Examples:
        >>> result = optimize_preventive_maintenance(2.5, 1000, 1000, 5000)
        >>> 0 < result.optimal_interval < 1000
        True
    """
    _validate_weibull(beta, eta)
    if cost_preventive <= 0 or cost_corrective <= 0:
        raise ValueError("Costs must be positive")
    if steps < 1:
        raise ValueError("steps must be at least 1")

    times = np.linspace(0.0, 3.0 * eta, steps + 1)
    reliability = np.exp(-((times / eta) ** beta))

    # cumulative ∫₀ᵗ R dt by the trapezoidal rule
    increments = (reliability[1:] + reliability[:-1]) / 2 * np.diff(times)
    integral = np.concatenate([[0.0], np.cumsum(increments)])

    cost_curve: List[CostPoint] = []
    for t, r, area in zip(times[1:], reliability[1:], integral[1:]):
        if t < 1 or area < 1e-9:
            continue
        cost = (cost_preventive * r + cost_corrective * (1 - r)) / area
        if math.isfinite(cost):
            cost_curve.append(CostPoint(time=float(t), cost=float(cost)))

    if not cost_curve:
        raise MaintenanceOptimizationError("Could not compute the maintenance cost curve")

    optimum = min(cost_curve, key=lambda p: p.cost)
    logger.debug(
        f"Preventive maintenance: optimal interval {optimum.time:.1f} "
        f"at cost rate {optimum.cost:.4g} (beta={beta}, eta={eta})"
    )

    return MaintenanceOptimizationResult(
        cost_curve=cost_curve,
        optimal_interval=optimum.time,
        min_cost=optimum.cost
    )


def simulate_weibull_failures(
    beta: float,
    eta: float,
    simulations: int = 10000,
    failure_cost: float = 1.0,
    bin_count: int = 20,
    seed: Optional[int] = None
) -> SimulationResult:
    """
    Monte Carlo simulation of Weibull failure times.

    Failure times are drawn by inverting the CDF, t = η·(-ln(1-u))^(1/β)
    with u uniform on [0, 1).

    Args:
        beta: Weibull shape parameter.
        eta: Weibull scale parameter.
        simulations: Number of simulated units.
        failure_cost: Cost per failure.
        bin_count: Number of equal-width histogram bins from 0 to the
            largest simulated time.
        seed: Optional seed for reproducible draws.

    Returns:
        SimulationResult with MTTF, total cost and histogram.

    Raises:
        ValueError: If parameters are invalid.
    """
    _validate_weibull(beta, eta)
    if simulations < 1:
        raise ValueError("simulations must be at least 1")
    if bin_count < 1:
        raise ValueError("bin_count must be at least 1")

    rng = np.random.default_rng(seed)
    u = rng.random(simulations)
    failure_times = eta * (-np.log1p(-u)) ** (1.0 / beta)

    max_time = float(np.max(failure_times))
    bin_size = max_time / bin_count if max_time > 0 else 1.0
    indices = np.minimum((failure_times // bin_size).astype(int), bin_count - 1)
    counts = np.bincount(indices, minlength=bin_count)

    histogram = [
        HistogramBin(lower=i * bin_size, upper=(i + 1) * bin_size, failures=int(count))
        for i, count in enumerate(counts)
    ]

    return SimulationResult(
        mttf=float(np.mean(failure_times)),
        total_cost=simulations * failure_cost,
        failure_times=failure_times.tolist(),
        histogram=histogram
    )
