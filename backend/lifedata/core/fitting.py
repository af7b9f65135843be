"""
Lifetime distribution fitting for failure and suspension data.

This module turns raw observations into fitted distribution parameters.
It supports the estimation methods offered by the dashboard:

- SRM: rank regression of y on x over the distribution's probability paper
- RRX: rank regression of x on y
- MLE: maximum likelihood (Newton-Raphson for Weibull, closed form for
  Normal/Lognormal/Exponential, numerical optimization otherwise)

Every estimate also carries rank-regression plot data so that the
probability plot stays consistent whichever method produced the
parameters. No function here raises for bad data: insufficient or
degenerate input yields a result without parameters.

References:
- Abernethy, The New Weibull Handbook, 5th ed.
- SciPy optimization documentation
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union
import logging
import math

import numpy as np
from scipy import optimize

from lifedata.core.distributions import (
    Distribution,
    DistributionParameters,
    GumbelParameters,
    LifeDistributionBase,
    LoglogisticParameters,
    get_distribution,
)
from lifedata.core.ranks import RankedFailure, adjusted_ranks, clean_times, expand_grouped
from lifedata.core.regression import EstimationMethod, RegressionLine, linear_regression
from lifedata.core.weibull import solve_weibull_mle


logger = logging.getLogger(__name__)


@dataclass
class PlotPoint:
    """A ranked failure on probability paper.

    Attributes:
        time: Failure time.
        prob: Median-rank estimate of F(time).
        x: Transformed time coordinate.
        y: Transformed probability coordinate.
    """
    time: float
    prob: float
    x: float
    y: float


@dataclass
class PlotData:
    """Probability-plot data for a rank-regression fit.

    Attributes:
        points: One PlotPoint per ranked failure with finite coordinates.
        line: Two (x, y) endpoints of the regression line spanning the
            observed x range.
        r_squared: Coefficient of determination of the regression (0-1).
        angle: Inclination of the regression line in degrees.
    """
    points: List[PlotPoint]
    line: List[Tuple[float, float]]
    r_squared: float
    angle: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "points": [
                {"time": p.time, "prob": p.prob, "x": p.x, "y": p.y}
                for p in self.points
            ],
            "line": [{"x": x, "y": y} for x, y in self.line],
            "rSquared": self.r_squared,
            "angle": self.angle,
        }


@dataclass(frozen=True)
class EstimationResult:
    """Fitted model for one distribution and observation set.

    Attributes:
        distribution: Family that was fitted.
        method: Estimation method requested by the caller.
        provenance: Method that actually produced the parameters (differs
            from ``method`` when MLE fell back to rank regression); None if
            no parameters could be estimated.
        parameters: Fitted parameters, or None for insufficient data.
        plot_data: Rank-regression plot data, or None if unavailable.
        log_likelihood: Censored log-likelihood of ``parameters`` against
            all observations.
    """
    distribution: Distribution
    method: EstimationMethod
    provenance: Optional[EstimationMethod] = None
    parameters: Optional[DistributionParameters] = None
    plot_data: Optional[PlotData] = None
    log_likelihood: Optional[float] = None

    @property
    def is_defined(self) -> bool:
        return self.parameters is not None

    @property
    def r_squared(self) -> Optional[float]:
        return self.plot_data.r_squared if self.plot_data is not None else None

    def parameters_dict(self) -> Dict[str, float]:
        """Parameters as a plain mapping, ``{}`` when undefined."""
        return self.parameters.to_dict() if self.parameters is not None else {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "distribution": self.distribution.value,
            "method": self.method.value,
            "provenance": self.provenance.value if self.provenance else None,
            "parameters": self.parameters_dict(),
            "plotData": self.plot_data.to_dict() if self.plot_data else None,
            "rSquared": self.r_squared,
            "logLikelihood": _finite_or_none(self.log_likelihood),
        }


@dataclass
class DistributionFit:
    """One family's entry in a best-distribution comparison."""
    distribution: Distribution
    parameters: Optional[DistributionParameters]
    log_likelihood: Optional[float]
    r_squared: Optional[float]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "distribution": self.distribution.value,
            "parameters": self.parameters.to_dict() if self.parameters else {},
            "logLikelihood": _finite_or_none(self.log_likelihood),
            "rSquared": self.r_squared,
        }


@dataclass
class BestFitResult:
    """All family fits ranked best first, and the winning family."""
    results: List[DistributionFit] = field(default_factory=list)
    best: Optional[Distribution] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "results": [fit.to_dict() for fit in self.results],
            "best": self.best.value if self.best else None,
        }


def _finite_or_none(value: Optional[float]) -> Optional[float]:
    if value is None or not math.isfinite(value):
        return None
    return value


def linearize_points(
    family: LifeDistributionBase,
    ranked: Sequence[RankedFailure]
) -> List[PlotPoint]:
    """Transform ranked failures onto the family's probability paper.

    Points whose transformed coordinates are not finite are discarded.
    """
    points = []
    for item in ranked:
        x, y = family.linearize(item.time, item.prob)
        if math.isfinite(x) and math.isfinite(y):
            points.append(PlotPoint(time=item.time, prob=item.prob, x=x, y=y))
    return points


def build_plot_data(
    points: Sequence[PlotPoint],
    line: RegressionLine
) -> PlotData:
    """Assemble plot data for a regression line through ``points``."""
    x_min = min(p.x for p in points)
    x_max = max(p.x for p in points)
    return PlotData(
        points=list(points),
        line=[(x_min, line.predict(x_min)), (x_max, line.predict(x_max))],
        r_squared=line.r_squared,
        angle=math.degrees(math.atan(line.slope))
    )


def _rank_regression(
    family: LifeDistributionBase,
    failures: List[float],
    suspensions: List[float],
    method: EstimationMethod
) -> Tuple[Optional[DistributionParameters], Optional[PlotData]]:
    ranked = adjusted_ranks(failures, suspensions)
    points = linearize_points(family, ranked)
    if len(points) < 2:
        logger.debug(
            f"{family.get_name()}: insufficient data for rank regression "
            f"({len(points)} usable points)"
        )
        return None, None

    regression_method = EstimationMethod.RRX if method == EstimationMethod.RRX else EstimationMethod.SRM
    line = linear_regression([p.x for p in points], [p.y for p in points], regression_method)
    if line is None:
        logger.debug(f"{family.get_name()}: degenerate regression data")
        return None, None

    parameters = family.parameters_from_line(line.slope, line.intercept)
    return parameters, build_plot_data(points, line)


def _make_result(
    family: LifeDistributionBase,
    method: EstimationMethod,
    provenance: EstimationMethod,
    parameters: Optional[DistributionParameters],
    plot_data: Optional[PlotData],
    failures: List[float],
    suspensions: List[float]
) -> EstimationResult:
    if parameters is None:
        return EstimationResult(
            distribution=family.distribution,
            method=method,
            plot_data=plot_data
        )
    return EstimationResult(
        distribution=family.distribution,
        method=method,
        provenance=provenance,
        parameters=parameters,
        plot_data=plot_data,
        log_likelihood=family.log_likelihood(parameters, failures, suspensions)
    )


def estimate_by_rank_regression(
    distribution: Union[Distribution, str],
    failure_times: Sequence[float],
    suspension_times: Optional[Sequence[float]] = None,
    method: EstimationMethod = EstimationMethod.SRM
) -> EstimationResult:
    """Fit a distribution by linear regression on its probability paper.

    Ranks are computed with the adjusted-rank method so suspensions are
    honoured. The (x, y) points are regressed y-on-x for SRM or x-on-y for
    RRX and the line is back-transformed into the family's parameters.

    Args:
        distribution: Family to fit.
        failure_times: Failure times (> 0).
        suspension_times: Suspension times (> 0).
        method: SRM or RRX.

    Returns:
        EstimationResult; parameters are None when fewer than 2 usable
        points remain or the regression is degenerate.

    Examples:
        >>> result = estimate_by_rank_regression("Weibull", [105, 213, 332, 351])
        >>> result.parameters.beta > 0
        True
    """
    family = get_distribution(distribution)
    failures = clean_times(failure_times)
    suspensions = clean_times(suspension_times)
    parameters, plot_data = _rank_regression(family, failures, suspensions, method)
    return _make_result(family, method, method, parameters, plot_data, failures, suspensions)


def estimate_weibull_mle(
    failure_times: Sequence[float],
    suspension_times: Optional[Sequence[float]] = None
) -> EstimationResult:
    """Weibull maximum likelihood with a rank-regression safety net.

    Step 1 runs the Newton-Raphson shape iteration. If it breaks down (a
    non-finite or non-positive update), step 2 uses the SRM rank-regression
    estimate on the same data instead. ``provenance`` records which step
    produced the parameters. The plot data is always the SRM fit.
    """
    family = get_distribution(Distribution.WEIBULL)
    failures = clean_times(failure_times)
    suspensions = clean_times(suspension_times)

    srm_parameters, plot_data = _rank_regression(family, failures, suspensions, EstimationMethod.SRM)

    solution = solve_weibull_mle(failures, suspensions)
    if solution is not None:
        return _make_result(
            family, EstimationMethod.MLE, EstimationMethod.MLE,
            solution.parameters, plot_data, failures, suspensions
        )

    logger.debug("Weibull MLE did not converge, using rank regression (SRM) estimate")
    return _make_result(
        family, EstimationMethod.MLE, EstimationMethod.SRM,
        srm_parameters, plot_data, failures, suspensions
    )


# Unconstrained parameterizations for numerical likelihood maximisation
_UNCONSTRAINED = {
    Distribution.LOGLOGISTIC: (
        lambda p: [math.log(p.alpha), math.log(p.beta)],
        lambda theta: LoglogisticParameters(alpha=math.exp(theta[0]), beta=math.exp(theta[1])),
    ),
    Distribution.GUMBEL: (
        lambda p: [p.mu, math.log(p.sigma)],
        lambda theta: GumbelParameters(mu=theta[0], sigma=math.exp(theta[1])),
    ),
}


def _maximize_likelihood(
    family: LifeDistributionBase,
    start: DistributionParameters,
    failures: List[float],
    suspensions: List[float]
) -> Optional[DistributionParameters]:
    """Numerically maximise the censored log-likelihood from ``start``."""
    if family.distribution not in _UNCONSTRAINED:
        return None
    to_theta, from_theta = _UNCONSTRAINED[family.distribution]

    def negative_log_likelihood(theta):
        try:
            params = from_theta(theta)
        except OverflowError:
            return np.inf
        value = family.log_likelihood(params, failures, suspensions)
        if value is None or not math.isfinite(value):
            return np.inf
        return -value

    try:
        x0 = np.asarray(to_theta(start), dtype=float)
    except (ValueError, OverflowError):
        return None
    start_value = negative_log_likelihood(x0)
    if not np.isfinite(start_value):
        return None

    result = optimize.minimize(
        negative_log_likelihood,
        x0=x0,
        method="Nelder-Mead",
        options={"xatol": 1e-8, "fatol": 1e-10, "maxiter": 2000}
    )

    if not result.success or not np.isfinite(result.fun) or result.fun > start_value:
        logger.debug(f"{family.get_name()} MLE optimization failed: {result.message}")
        return None

    return from_theta(result.x)


def estimate_parameters(
    distribution: Union[Distribution, str],
    failure_times: Sequence[Any],
    suspension_times: Optional[Sequence[Any]] = None,
    method: Union[EstimationMethod, str] = EstimationMethod.SRM,
    is_grouped: bool = False
) -> EstimationResult:
    """Estimate distribution parameters from life data.

    This is the single entry point used by the dashboard. Routing:

    - SRM / RRX: rank regression for any family.
    - MLE, Weibull: Newton-Raphson with fallback to SRM.
    - MLE, Normal / Lognormal / Exponential: closed-form estimators
      (sample mean and Bessel-corrected standard deviation of the failures,
      of their logarithms, and 1 / mean of all times respectively).
    - MLE, Loglogistic / Gumbel: numerical maximisation of the censored
      likelihood seeded with the SRM fit, falling back to that fit.

    Grouped input (``[{"time": t, "qty": k}, ...]``) is expanded into
    repeated times before anything else happens.

    Args:
        distribution: Family name or Distribution member.
        failure_times: Failure times, or groups when ``is_grouped``.
        suspension_times: Suspension times, or groups when ``is_grouped``.
        method: SRM, RRX or MLE.
        is_grouped: Whether the inputs are grouped counts.

    Returns:
        EstimationResult. When there are no failures the result has no
        parameters (serialized as ``{}``).

    Raises:
        ValueError: If the distribution or method name is unknown.
    """
    family = get_distribution(distribution)
    method = EstimationMethod.parse(method)

    if is_grouped:
        failure_times = expand_grouped(failure_times)
        suspension_times = expand_grouped(suspension_times)

    failures = clean_times(failure_times)
    suspensions = clean_times(suspension_times)

    if not failures:
        logger.debug(f"{family.get_name()}: no failures, parameters undefined")
        return EstimationResult(distribution=family.distribution, method=method)

    if method != EstimationMethod.MLE:
        return estimate_by_rank_regression(family.distribution, failures, suspensions, method)

    if family.distribution == Distribution.WEIBULL:
        return estimate_weibull_mle(failures, suspensions)

    srm_parameters, plot_data = _rank_regression(family, failures, suspensions, EstimationMethod.SRM)

    closed_form = family.estimate_closed_form(failures, suspensions)
    if closed_form is not None:
        return _make_result(
            family, method, EstimationMethod.MLE,
            closed_form, plot_data, failures, suspensions
        )

    if srm_parameters is not None and family.is_valid(srm_parameters):
        fitted = _maximize_likelihood(family, srm_parameters, failures, suspensions)
        if fitted is not None:
            return _make_result(
                family, method, EstimationMethod.MLE,
                fitted, plot_data, failures, suspensions
            )

    logger.debug(f"{family.get_name()} MLE unavailable, using rank regression (SRM) estimate")
    return _make_result(
        family, method, EstimationMethod.SRM,
        srm_parameters, plot_data, failures, suspensions
    )


def find_best_distribution(
    failure_times: Sequence[float],
    suspension_times: Optional[Sequence[float]] = None
) -> BestFitResult:
    """Fit every family and rank them by log-likelihood.

    Each family is fitted by SRM rank regression; its log-likelihood is
    evaluated under its own parameters against all failures and
    suspensions. Higher log-likelihood wins, ties go to the higher R².
    Families without a usable fit are listed last.

    Args:
        failure_times: Failure times (> 0).
        suspension_times: Suspension times (> 0).

    Returns:
        BestFitResult with every family's fit, best first.
    """
    failures = clean_times(failure_times)
    suspensions = clean_times(suspension_times)

    fits = []
    for distribution in Distribution:
        result = estimate_parameters(distribution, failures, suspensions, EstimationMethod.SRM)
        fits.append(DistributionFit(
            distribution=distribution,
            parameters=result.parameters,
            log_likelihood=result.log_likelihood,
            r_squared=result.r_squared
        ))

    def sort_key(fit: DistributionFit):
        log_likelihood = fit.log_likelihood
        if log_likelihood is None or math.isnan(log_likelihood):
            log_likelihood = -math.inf
        r_squared = fit.r_squared if fit.r_squared is not None else -math.inf
        return (log_likelihood, r_squared)

    ranked = sorted(fits, key=sort_key, reverse=True)

    best = None
    if ranked and ranked[0].log_likelihood is not None and math.isfinite(ranked[0].log_likelihood):
        best = ranked[0].distribution

    logger.debug(f"Best distribution: {best.value if best else None}")
    return BestFitResult(results=ranked, best=best)
