"""
Reliability function evaluation for one or many fitted models.

Builds the time series behind the dashboard's R(t), F(t), f(t) and λ(t)
charts. All models share one time grid so the series can be charted
together; a model that cannot be evaluated at a grid point contributes
None there instead of breaking the other models.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union
import logging
import math

import numpy as np

from lifedata.core.distributions import (
    Distribution,
    DistributionParameters,
    LifeDistributionBase,
    get_distribution,
)
from lifedata.core.ranks import clean_times


logger = logging.getLogger(__name__)


DEFAULT_GRID_POINTS = 101
DEFAULT_GRID_EXTENSION = 1.2

# t = 0 is evaluated here to avoid singularities at the origin
ZERO_TIME = 1e-9


@dataclass
class ReliabilityModel:
    """A named fitted model together with the data it was fitted on.

    Attributes:
        name: Series name (e.g. supplier or asset name).
        distribution: Distribution family.
        parameters: Fitted or manually overridden parameters. A mapping
            such as ``{"beta": 1.5, "eta": 1000}`` is accepted too.
        failure_times: Failure times, used to size the time grid.
        suspension_times: Suspension times, used to size the time grid.
    """
    name: str
    distribution: Union[Distribution, str]
    parameters: Optional[Union[DistributionParameters, Mapping[str, Any]]] = None
    failure_times: Sequence[float] = field(default_factory=list)
    suspension_times: Sequence[float] = field(default_factory=list)


@dataclass
class ReliabilityData:
    """Four grid-aligned series, one row per grid time.

    Each row is ``{"time": t, <model name>: value or None, ...}``.
    """
    reliability: List[Dict[str, Optional[float]]] = field(default_factory=list)
    unreliability: List[Dict[str, Optional[float]]] = field(default_factory=list)
    density: List[Dict[str, Optional[float]]] = field(default_factory=list)
    hazard: List[Dict[str, Optional[float]]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, List[Dict[str, Optional[float]]]]:
        return {
            "Rt": self.reliability,
            "Ft": self.unreliability,
            "ft": self.density,
            "lambda_t": self.hazard,
        }


def build_time_grid(
    max_time: float,
    points: int = DEFAULT_GRID_POINTS,
    extension: float = DEFAULT_GRID_EXTENSION
) -> np.ndarray:
    """Evenly spaced grid from 0 to ``extension * max_time`` inclusive."""
    upper = max(max_time, 0.0) * extension
    return np.linspace(0.0, upper, points)


def _resolve(model: ReliabilityModel):
    """Return (family, parameters) for a model, or (family, None) if unusable."""
    try:
        family = get_distribution(model.distribution)
    except ValueError:
        logger.debug(f"Model '{model.name}': unknown distribution {model.distribution!r}")
        return None, None

    params = model.parameters
    if isinstance(params, Mapping):
        params = family.parameters_from_dict(params)
    if not family.is_valid(params):
        logger.debug(f"Model '{model.name}': missing or invalid parameters")
        return family, None
    return family, params


def _finite(value: float) -> Optional[float]:
    value = float(value)
    return value if math.isfinite(value) else None


def evaluate_point(
    family: LifeDistributionBase,
    params: DistributionParameters,
    time: float
) -> Dict[str, Optional[float]]:
    """R, F, f and λ at one time; entries that cannot be computed are None."""
    values: Dict[str, Optional[float]] = {"Rt": None, "Ft": None, "ft": None, "lambda_t": None}
    try:
        r = family.reliability(time, params)
        values["Rt"] = _finite(r)
        values["Ft"] = _finite(family.cdf(time, params))
    except (OverflowError, ValueError, ZeroDivisionError):
        pass
    try:
        values["ft"] = _finite(family.pdf(time, params))
        values["lambda_t"] = _finite(family.hazard(time, params))
    except (OverflowError, ValueError, ZeroDivisionError):
        pass
    return values


def calculate_reliability_data(
    models: Sequence[ReliabilityModel],
    grid_points: int = DEFAULT_GRID_POINTS,
    grid_extension: float = DEFAULT_GRID_EXTENSION
) -> ReliabilityData:
    """Evaluate R(t), F(t), f(t) and λ(t) for several models on a shared grid.

    The grid runs from 0 to 1.2 × the largest failure or suspension time
    across all models. t = 0 is evaluated at 1e-9, but R(0) = 1 and
    F(0) = 0 are reported exactly. λ(t) = f(t) / R(t) with R floored at
    1e-9. Invalid models, or values that are not finite, become None.

    Args:
        models: Models to evaluate; names identify their columns.
        grid_points: Number of grid times.
        grid_extension: Factor applied to the largest observed time.

    Returns:
        ReliabilityData with one row per grid time in each series.

    Examples:
        >>> model = ReliabilityModel("A", "Weibull", {"beta": 2, "eta": 1000}, [800, 1200])
        >>> data = calculate_reliability_data([model])
        >>> data.reliability[0]["A"]
        1.0
    """
    data = ReliabilityData()
    if not models:
        return data

    all_times: List[float] = []
    for model in models:
        all_times.extend(clean_times(model.failure_times))
        all_times.extend(clean_times(model.suspension_times))
    grid = build_time_grid(max(all_times, default=0.0), grid_points, grid_extension)

    resolved = [(model.name, *_resolve(model)) for model in models]

    for t in grid:
        t = float(t)
        eval_time = ZERO_TIME if t == 0 else t
        rows = {key: {"time": t} for key in ("Rt", "Ft", "ft", "lambda_t")}

        for name, family, params in resolved:
            if params is not None:
                values = evaluate_point(family, params, eval_time)
            else:
                values = {"Rt": None, "Ft": None, "ft": None, "lambda_t": None}

            if t == 0:
                values["Rt"] = 1.0
                values["Ft"] = 0.0

            for key, value in values.items():
                rows[key][name] = value

        data.reliability.append(rows["Rt"])
        data.unreliability.append(rows["Ft"])
        data.density.append(rows["ft"])
        data.hazard.append(rows["lambda_t"])

    return data
