"""
Unit tests for Weibull analysis module.

Tests cover:
- Newton-Raphson maximum likelihood with and without suspensions
- Breakdown of the iteration on pathological data
- B-life and MTTF calculations
- Failure phase classification
"""

import math

import pytest
import numpy as np
from numpy.testing import assert_allclose
from scipy import stats

from lifedata.core.distributions import get_distribution, WeibullParameters
from lifedata.core.weibull import (
    solve_weibull_mle,
    calculate_b_life,
    calculate_mttf,
    classify_failure_phase,
    summarize_weibull,
    FailurePhase,
)


class TestSolveWeibullMLE:
    """Test Newton-Raphson Weibull fitting."""

    def test_complete_data_matches_scipy(self, weibull_sample):
        """Test agreement with scipy's MLE for uncensored data."""
        solution = solve_weibull_mle(weibull_sample)
        shape, _, scale = stats.weibull_min.fit(weibull_sample, floc=0)

        assert solution is not None
        assert solution.converged
        assert_allclose(solution.parameters.beta, shape, rtol=1e-3)
        assert_allclose(solution.parameters.eta, scale, rtol=1e-3)

    def test_recovers_true_parameters(self, weibull_sample):
        """Test that a large sample recovers beta=2, eta=1000."""
        params = solve_weibull_mle(weibull_sample).parameters

        assert_allclose(params.beta, 2.0, rtol=0.1)
        assert_allclose(params.eta, 1000.0, rtol=0.1)

    def test_censored_solution_maximizes_likelihood(self, censored_data):
        """Test that nearby parameters have a lower censored likelihood."""
        failures = censored_data["failures"]
        suspensions = censored_data["suspensions"]
        solution = solve_weibull_mle(failures, suspensions)
        family = get_distribution("Weibull")

        assert solution is not None
        best = family.log_likelihood(solution.parameters, failures, suspensions)
        beta, eta = solution.parameters.beta, solution.parameters.eta
        for factor_beta, factor_eta in [(1.02, 1.0), (0.98, 1.0), (1.0, 1.02), (1.0, 0.98)]:
            perturbed = WeibullParameters(beta=beta * factor_beta, eta=eta * factor_eta)
            assert family.log_likelihood(perturbed, failures, suspensions) < best

    def test_suspensions_raise_scale(self, censored_data):
        """Suspended units surviving longer push eta upwards."""
        failures = censored_data["failures"]
        without = solve_weibull_mle(failures).parameters
        with_suspensions = solve_weibull_mle(failures, censored_data["suspensions"]).parameters

        assert with_suspensions.eta > without.eta

    def test_scale_invariance(self, weibull_sample):
        """Rescaling the data rescales eta and leaves beta unchanged."""
        base = solve_weibull_mle(weibull_sample).parameters
        scaled = solve_weibull_mle(weibull_sample * 1000.0).parameters

        assert_allclose(scaled.beta, base.beta, rtol=1e-9)
        assert_allclose(scaled.eta, base.eta * 1000.0, rtol=1e-9)

    def test_breakdown_returns_none(self):
        """A negative Newton update abandons the iteration."""
        assert solve_weibull_mle([1.0, 1e6]) is None

    def test_no_failures(self):
        """Test that there is nothing to fit without failures."""
        assert solve_weibull_mle([], [100.0, 200.0]) is None


class TestCalculateBLife:
    """Test B-life calculation function."""

    def test_b10_life(self):
        """Test B10 life calculation."""
        # For beta=2, eta=1000, B10 should be approximately 324.6
        result = calculate_b_life(shape=2.0, scale=1000, percentile=0.1)
        expected = 1000 * (-np.log(0.9)) ** 0.5
        assert_allclose(result, expected, rtol=1e-10)

    def test_b50_life(self):
        """Test B50 (median) life calculation."""
        result = calculate_b_life(shape=2.0, scale=1000, percentile=0.5)
        expected = 1000 * (-np.log(0.5)) ** 0.5
        assert_allclose(result, expected, rtol=1e-10)

    def test_b63_2_life_equals_scale(self):
        """Test that B63.2 life equals scale parameter by definition."""
        result = calculate_b_life(shape=2.0, scale=1000, percentile=0.632)
        assert_allclose(result, 1000, rtol=0.01)

    def test_invalid_shape_parameter(self):
        """Test that non-positive shape raises error."""
        with pytest.raises(ValueError, match="Shape parameter must be positive"):
            calculate_b_life(shape=0, scale=1000, percentile=0.1)

    def test_invalid_scale_parameter(self):
        """Test that non-positive scale raises error."""
        with pytest.raises(ValueError, match="Scale parameter must be positive"):
            calculate_b_life(shape=2.0, scale=0, percentile=0.1)

    def test_invalid_percentile(self):
        """Test that out-of-range percentile raises error."""
        with pytest.raises(ValueError, match="Percentile must be between 0 and 1"):
            calculate_b_life(shape=2.0, scale=1000, percentile=1.5)

        with pytest.raises(ValueError, match="Percentile must be between 0 and 1"):
            calculate_b_life(shape=2.0, scale=1000, percentile=-0.1)


class TestMTTF:
    """Test mean time to failure."""

    def test_exponential_case(self):
        """For beta=1 the MTTF equals eta."""
        assert_allclose(calculate_mttf(1.0, 500.0), 500.0)

    def test_rayleigh_case(self):
        """For beta=2 the MTTF is eta * sqrt(pi) / 2."""
        assert_allclose(calculate_mttf(2.0, 1000.0), 1000.0 * math.sqrt(math.pi) / 2)

    def test_invalid_parameters(self):
        """Test that non-positive parameters raise error."""
        with pytest.raises(ValueError):
            calculate_mttf(-1.0, 1000.0)


class TestFailurePhase:
    """Test bathtub-curve classification."""

    @pytest.mark.parametrize("beta,expected", [
        (0.5, FailurePhase.INFANT_MORTALITY),
        (0.949, FailurePhase.INFANT_MORTALITY),
        (0.95, FailurePhase.USEFUL_LIFE),
        (1.0, FailurePhase.USEFUL_LIFE),
        (1.05, FailurePhase.USEFUL_LIFE),
        (1.2, FailurePhase.WEAR_OUT),
        (3.5, FailurePhase.WEAR_OUT),
    ])
    def test_classification(self, beta, expected):
        """Test phase boundaries."""
        assert classify_failure_phase(beta) is expected

    def test_summary(self, weibull_params):
        """Test the derived life metrics."""
        summary = summarize_weibull(WeibullParameters(**weibull_params))

        assert summary.b63_life == 1000.0
        assert_allclose(summary.b10_life, calculate_b_life(2.0, 1000.0, 0.1))
        assert_allclose(summary.mttf, calculate_mttf(2.0, 1000.0))
        assert summary.failure_phase is FailurePhase.WEAR_OUT

    def test_summary_invalid_parameters(self):
        """Test that invalid parameters give no summary."""
        assert summarize_weibull(WeibullParameters(beta=-1.0, eta=100.0)) is None
