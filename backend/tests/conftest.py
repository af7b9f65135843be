"""
Pytest configuration and shared fixtures.

This module provides common life-data fixtures for all test modules.
"""

import pytest
import numpy as np
from typing import Dict, List


# Failure time fixtures
@pytest.fixture
def failure_times() -> List[float]:
    """Complete (uncensored) failure times with a duplicate value."""
    return [105, 213, 332, 351, 365, 397, 400, 397, 437, 1014, 1126, 1132, 3944, 5042]


@pytest.fixture
def censored_data() -> Dict[str, List[float]]:
    """Failures mixed with right-censored suspensions."""
    return {
        "failures": [150, 340, 560, 800, 1130, 1720, 2470, 4210],
        "suspensions": [600, 1000, 1500, 3000, 5000],
    }


@pytest.fixture
def weibull_sample() -> np.ndarray:
    """Seeded sample of 500 lives from Weibull(beta=2, eta=1000)."""
    rng = np.random.default_rng(20240501)
    return 1000.0 * rng.weibull(2.0, 500)


@pytest.fixture
def grouped_failures() -> List[Dict[str, float]]:
    """Grouped failure counts as sent by the dashboard."""
    return [
        {"time": 150, "qty": 2},
        {"time": 300, "qty": 1},
        {"time": 450, "qty": 3},
        {"time": 700, "qty": 1},
    ]


# Parameter fixtures
@pytest.fixture
def weibull_params() -> Dict[str, float]:
    """Weibull parameters for wear-out behaviour."""
    return {"beta": 2.0, "eta": 1000.0}
