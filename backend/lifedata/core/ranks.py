"""
Plotting positions for life data.

Converts failure and suspension (right-censored) times into empirical
failure probabilities using Johnson's adjusted rank method combined with
Benard's median-rank approximation.

Reference:
- L. G. Johnson, The Statistical Treatment of Fatigue Experiments (1964)
- Benard's approximation: MR(i) = (i - 0.3) / (n + 0.4)
"""

from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple, Union
import logging
import math

import numpy as np


logger = logging.getLogger(__name__)


@dataclass
class RankedFailure:
    """A failure with its adjusted rank and median-rank probability.

    Attributes:
        time: Failure time.
        rank: Adjusted (possibly fractional) rank order.
        prob: Median-rank estimate of F(time).
    """
    time: float
    rank: float
    prob: float


@dataclass
class GroupedObservation:
    """A time value observed ``quantity`` times."""
    time: float
    quantity: int = 1


GroupedInput = Union[GroupedObservation, Mapping[str, Any], Tuple[float, int], float]


def clean_times(times: Optional[Iterable[float]]) -> List[float]:
    """Return the positive, finite entries of ``times`` as floats."""
    if times is None:
        return []
    cleaned = []
    for value in times:
        try:
            t = float(value)
        except (TypeError, ValueError):
            logger.debug(f"Discarding non-numeric observation {value!r}")
            continue
        if not math.isfinite(t) or t <= 0:
            logger.debug(f"Discarding non-positive observation {t}")
            continue
        cleaned.append(t)
    return cleaned


def expand_grouped(groups: Optional[Sequence[GroupedInput]]) -> List[float]:
    """Expand grouped observations into repeated time values.

    Each entry may be a ``GroupedObservation``, a mapping with ``time`` and
    ``qty`` (or ``quantity``) keys, a ``(time, qty)`` pair or a bare time
    (quantity 1). Order is preserved.

    Examples:
        >>> expand_grouped([{"time": 150, "qty": 2}, {"time": 300, "qty": 1}])
        [150.0, 150.0, 300.0]
    """
    if not groups:
        return []

    expanded: List[float] = []
    for group in groups:
        if isinstance(group, GroupedObservation):
            time, quantity = group.time, group.quantity
        elif isinstance(group, Mapping):
            time = group.get("time")
            quantity = group.get("qty", group.get("quantity", 1))
        elif isinstance(group, (int, float)):
            time, quantity = group, 1
        else:
            time, quantity = group

        if time is None:
            continue
        expanded.extend([float(time)] * max(int(quantity), 0))

    return expanded


def benard_median_ranks(n: int) -> np.ndarray:
    """Benard median ranks for a complete sample of size ``n``.

    Returns:
        Array of (i - 0.3) / (n + 0.4) for i = 1..n
    """
    i = np.arange(1, n + 1)
    return (i - 0.3) / (n + 0.4)


def adjusted_ranks(
    failure_times: Sequence[float],
    suspension_times: Optional[Sequence[float]] = None
) -> List[RankedFailure]:
    """Compute adjusted ranks and median-rank probabilities.

    Failures and suspensions are merged and sorted by time (a failure sorts
    before a suspension at the same time). Walking the sorted list, each
    failure at 0-based position i receives

        increment = (n + 1 - previous_rank) / (1 + (n - i))
        rank = previous_rank + increment

    Suspensions get no rank but reduce the number of items remaining for
    later failures. Without suspensions this reduces to rank = i + 1.

    Args:
        failure_times: Failure times (> 0).
        suspension_times: Suspension times (> 0).

    Returns:
        One RankedFailure per failure with prob < 1, in time order. Empty
        when there are no failures.
    """
    failures = list(failure_times) if failure_times is not None else []
    suspensions = list(suspension_times) if suspension_times is not None else []
    if not failures:
        return []

    merged = sorted(
        [(t, False) for t in failures] + [(t, True) for t in suspensions],
        key=lambda item: (item[0], item[1])
    )
    n = len(merged)

    ranked: List[RankedFailure] = []
    previous_rank = 0.0
    for i, (time, is_suspension) in enumerate(merged):
        if is_suspension:
            continue
        items_remaining = n - i
        increment = (n + 1 - previous_rank) / (1 + items_remaining)
        rank = previous_rank + increment
        previous_rank = rank

        prob = (rank - 0.3) / (n + 0.4)
        if prob >= 1:
            continue
        ranked.append(RankedFailure(time=time, rank=rank, prob=prob))

    return ranked
