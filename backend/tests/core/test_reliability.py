"""
Unit tests for reliability function evaluation.
"""

import math

import pytest
from numpy.testing import assert_allclose

from lifedata.core.distributions import Distribution, WeibullParameters
from lifedata.core.fitting import estimate_parameters
from lifedata.core.reliability import (
    ReliabilityModel,
    build_time_grid,
    calculate_reliability_data,
)


def fitted_model(name, distribution, failures, suspensions=None):
    result = estimate_parameters(distribution, failures, suspensions)
    return ReliabilityModel(
        name=name,
        distribution=distribution,
        parameters=result.parameters,
        failure_times=failures,
        suspension_times=suspensions or []
    )


class TestTimeGrid:
    """Test the shared time grid."""

    def test_grid_spans_extended_range(self):
        """Test 101 points from 0 to 1.2 x max."""
        grid = build_time_grid(1000.0)

        assert len(grid) == 101
        assert grid[0] == 0.0
        assert_allclose(grid[-1], 1200.0)

    def test_grid_uses_largest_time_of_all_models(self):
        """Suspensions and other models extend the grid."""
        models = [
            ReliabilityModel("A", "Weibull", {"beta": 2, "eta": 100}, [50, 80]),
            ReliabilityModel("B", "Weibull", {"beta": 2, "eta": 100}, [60], [500]),
        ]
        data = calculate_reliability_data(models)

        assert_allclose(data.reliability[-1]["time"], 600.0)


class TestCalculateReliabilityData:
    """Test the R, F, f and λ series."""

    @pytest.mark.parametrize("distribution", list(Distribution))
    def test_reliability_and_unreliability_sum_to_one(self, distribution, failure_times):
        """Test R(t) + F(t) = 1 at every grid time."""
        model = fitted_model("series", distribution, failure_times)
        data = calculate_reliability_data([model])

        for r_row, f_row in zip(data.reliability, data.unreliability):
            if r_row["series"] is not None and f_row["series"] is not None:
                assert_allclose(r_row["series"] + f_row["series"], 1.0, rtol=1e-9)

    @pytest.mark.parametrize("distribution", list(Distribution))
    def test_exact_values_at_zero(self, distribution, failure_times):
        """R(0) = 1 and F(0) = 0 for every family."""
        model = fitted_model("series", distribution, failure_times)
        data = calculate_reliability_data([model])

        assert data.reliability[0]["time"] == 0.0
        assert data.reliability[0]["series"] == 1.0
        assert data.unreliability[0]["series"] == 0.0

    @pytest.mark.parametrize("distribution", list(Distribution))
    def test_reliability_is_non_increasing(self, distribution, failure_times):
        """R(t) never increases along the grid."""
        model = fitted_model("series", distribution, failure_times)
        values = [row["series"] for row in calculate_reliability_data([model]).reliability]

        assert all(v is not None for v in values)
        assert all(b <= a + 1e-12 for a, b in zip(values, values[1:]))

    def test_weibull_values(self, weibull_params):
        """Test closed-form values at grid times."""
        model = ReliabilityModel("W", "Weibull", WeibullParameters(**weibull_params), [1000.0])
        data = calculate_reliability_data([model])

        row = 50  # t = 600
        t = data.reliability[row]["time"]
        assert_allclose(t, 600.0)
        r = math.exp(-(t / 1000.0) ** 2)
        assert_allclose(data.reliability[row]["W"], r)
        assert_allclose(data.unreliability[row]["W"], 1 - r)
        assert_allclose(data.density[row]["W"], 2 / 1000.0 * (t / 1000.0) * r)
        assert_allclose(data.hazard[row]["W"], 2 / 1000.0 * (t / 1000.0))

    def test_parameters_from_mapping(self, weibull_params):
        """A plain dict of parameters is accepted as a manual override."""
        from_dict = ReliabilityModel("W", "Weibull", weibull_params, [1000.0])
        from_object = ReliabilityModel("W", "Weibull", WeibullParameters(**weibull_params), [1000.0])

        assert calculate_reliability_data([from_dict]).to_dict() == \
            calculate_reliability_data([from_object]).to_dict()

    def test_invalid_model_does_not_affect_others(self, failure_times):
        """A bad model produces None without breaking the good one."""
        good = fitted_model("good", "Weibull", failure_times)
        missing = ReliabilityModel("missing", "Weibull", None, [100.0])
        invalid = ReliabilityModel("invalid", "Normal", {"mean": 10.0, "stdDev": -1.0}, [100.0])
        unknown = ReliabilityModel("unknown", "Cauchy", {"a": 1.0}, [100.0])

        alone = calculate_reliability_data([good])
        mixed = calculate_reliability_data([good, missing, invalid, unknown])

        for row_alone, row_mixed in zip(alone.reliability, mixed.reliability):
            assert row_mixed["good"] == row_alone["good"]
        for row in mixed.hazard:
            assert row["missing"] is None
            assert row["invalid"] is None
            assert row["unknown"] is None
        # R(0) and F(0) are reported even for unusable models
        assert mixed.reliability[0]["missing"] == 1.0
        assert mixed.reliability[1]["missing"] is None

    def test_steep_model_stays_defined_to_grid_end(self):
        """A steep Weibull saturates at R = 0 and F = 1 rather than dropping out."""
        model = ReliabilityModel("steep", "Weibull", {"beta": 300.0, "eta": 100.0}, [1000.0])
        data = calculate_reliability_data([model])
        values = [row["steep"] for row in data.reliability]

        assert_allclose(data.reliability[-1]["time"], 1200.0)
        assert all(v is not None for v in values)
        assert all(b <= a for a, b in zip(values, values[1:]))
        assert data.reliability[-1]["steep"] == 0.0
        assert data.unreliability[-1]["steep"] == 1.0
        assert data.density[-1]["steep"] == 0.0

    def test_series_keys(self, failure_times):
        """Test serialized series names."""
        data = calculate_reliability_data([fitted_model("A", "Weibull", failure_times)])
        assert set(data.to_dict()) == {"Rt", "Ft", "ft", "lambda_t"}
        assert len(data.to_dict()["Rt"]) == 101

    def test_no_models(self):
        """Test empty input."""
        data = calculate_reliability_data([])
        assert data.reliability == []
