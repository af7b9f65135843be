"""
Unit tests for distribution fitting.

Tests cover:
- Rank regression (SRM / RRX) on complete and censored data
- Weibull MLE and its fallback to rank regression
- Closed-form and numerical MLE for the other families
- Grouped input expansion
- Best-distribution selection
"""

import math

import pytest
import numpy as np
from numpy.testing import assert_allclose

from lifedata.core.distributions import Distribution, get_distribution
from lifedata.core.fitting import (
    estimate_parameters,
    estimate_by_rank_regression,
    estimate_weibull_mle,
    find_best_distribution,
)
from lifedata.core.ranks import benard_median_ranks
from lifedata.core.regression import EstimationMethod


class TestRankRegression:
    """Test SRM and RRX estimation."""

    def test_weibull_srm_reference_dataset(self, failure_times):
        """Test the reference dataset against a direct OLS on Weibull paper."""
        result = estimate_parameters("Weibull", failure_times, method="SRM")

        times = np.sort(np.asarray(failure_times, dtype=float))
        probs = benard_median_ranks(len(times))
        slope, intercept = np.polyfit(np.log(times), np.log(-np.log(1 - probs)), 1)

        assert result.provenance is EstimationMethod.SRM
        assert_allclose(result.parameters.beta, slope, rtol=1e-9)
        assert_allclose(result.parameters.eta, math.exp(-intercept / slope), rtol=1e-9)
        assert 0.7 < result.parameters.beta < 1.1
        assert 900 < result.parameters.eta < 2500

    @pytest.mark.parametrize("distribution", list(Distribution))
    def test_any_complete_sample_gives_valid_fit(self, distribution, failure_times):
        """Test positive parameters and R² in [0, 1]."""
        result = estimate_parameters(distribution, failure_times)

        assert result.is_defined
        assert get_distribution(distribution).is_valid(result.parameters)
        assert 0.0 <= result.r_squared <= 1.0

    def test_two_failures_are_enough(self):
        """Test the smallest usable sample."""
        result = estimate_parameters("Weibull", [100.0, 300.0])

        assert result.parameters.beta > 0
        assert result.parameters.eta > 0
        assert_allclose(result.r_squared, 1.0)

    def test_round_trip_large_sample(self, weibull_sample):
        """SRM recovers Weibull(2, 1000) within 10% for n=500."""
        result = estimate_parameters("Weibull", weibull_sample, method=EstimationMethod.SRM)

        assert_allclose(result.parameters.beta, 2.0, rtol=0.1)
        assert_allclose(result.parameters.eta, 1000.0, rtol=0.1)

    def test_rrx_is_steeper_than_srm(self, failure_times):
        """Regressing x on y gives the larger Weibull slope."""
        srm = estimate_parameters("Weibull", failure_times, method="SRM")
        rrx = estimate_parameters("Weibull", failure_times, method="RRX")

        assert rrx.provenance is EstimationMethod.RRX
        assert rrx.parameters.beta > srm.parameters.beta
        assert_allclose(rrx.r_squared, srm.r_squared)

    def test_suspensions_change_the_fit(self, censored_data):
        """Suspensions lower the median ranks and raise eta."""
        without = estimate_parameters("Weibull", censored_data["failures"])
        with_suspensions = estimate_parameters(
            "Weibull", censored_data["failures"], censored_data["suspensions"]
        )

        assert with_suspensions.parameters.eta > without.parameters.eta
        assert with_suspensions.log_likelihood is not None

    def test_plot_data(self, failure_times):
        """Test probability plot points, line and angle."""
        result = estimate_parameters("Weibull", failure_times)
        plot = result.plot_data

        assert len(plot.points) == len(failure_times)
        xs = [p.x for p in plot.points]
        assert plot.line[0][0] == min(xs)
        assert plot.line[1][0] == max(xs)
        assert_allclose(plot.angle, math.degrees(math.atan(result.parameters.beta)))

    def test_discards_invalid_observations(self, failure_times):
        """Non-positive and non-finite times do not affect the fit."""
        clean = estimate_parameters("Weibull", failure_times)
        noisy = estimate_parameters("Weibull", failure_times + [0, -5, math.nan], [-1.0])

        assert noisy.parameters == clean.parameters


class TestInsufficientData:
    """Test that bad input degrades to undefined results."""

    def test_no_failures(self):
        """Test empty parameters when only suspensions are given."""
        result = estimate_parameters("Weibull", [], [100.0, 200.0], method="MLE")

        assert not result.is_defined
        assert result.parameters_dict() == {}
        assert result.to_dict()["parameters"] == {}
        assert result.provenance is None

    def test_single_failure_rank_regression(self):
        """Test that one point cannot define a regression line."""
        result = estimate_parameters("Normal", [500.0])

        assert not result.is_defined
        assert result.plot_data is None

    def test_identical_times_are_degenerate(self):
        """Test zero variance in x."""
        result = estimate_parameters("Weibull", [100.0, 100.0, 100.0])
        assert not result.is_defined

    def test_unknown_names_raise(self, failure_times):
        """Test caller errors."""
        with pytest.raises(ValueError):
            estimate_parameters("Pareto", failure_times)
        with pytest.raises(ValueError):
            estimate_parameters("Weibull", failure_times, method="LSQ")


class TestMaximumLikelihood:
    """Test MLE estimation and fallbacks."""

    def test_weibull_mle(self, weibull_sample):
        """Test MLE provenance and accuracy."""
        result = estimate_parameters("Weibull", weibull_sample, method="MLE")

        assert result.method is EstimationMethod.MLE
        assert result.provenance is EstimationMethod.MLE
        assert_allclose(result.parameters.beta, 2.0, rtol=0.1)
        assert_allclose(result.parameters.eta, 1000.0, rtol=0.1)
        # the probability plot always shows the SRM line
        srm = estimate_parameters("Weibull", weibull_sample, method="SRM")
        assert_allclose(result.r_squared, srm.r_squared)

    def test_mle_beats_srm_likelihood(self, censored_data):
        """MLE parameters have at least the SRM log-likelihood."""
        mle = estimate_parameters("Weibull", censored_data["failures"], censored_data["suspensions"], "MLE")
        srm = estimate_parameters("Weibull", censored_data["failures"], censored_data["suspensions"], "SRM")

        assert mle.log_likelihood >= srm.log_likelihood

    def test_weibull_mle_falls_back_to_srm(self):
        """A breakdown of Newton-Raphson yields exactly the SRM estimate."""
        failures = [1.0, 1e6]
        result = estimate_weibull_mle(failures)
        direct = estimate_by_rank_regression("Weibull", failures, method=EstimationMethod.SRM)

        assert result.method is EstimationMethod.MLE
        assert result.provenance is EstimationMethod.SRM
        assert result.parameters == direct.parameters

    def test_fallback_through_dispatch(self):
        """Test the fallback via estimate_parameters."""
        result = estimate_parameters("Weibull", [1.0, 1e6], method="MLE")
        assert result.provenance is EstimationMethod.SRM

    def test_normal_closed_form(self, failure_times):
        """Test sample mean and Bessel-corrected standard deviation."""
        result = estimate_parameters("Normal", failure_times, method="MLE")

        assert result.provenance is EstimationMethod.MLE
        assert_allclose(result.parameters.mean, np.mean(failure_times))
        assert_allclose(result.parameters.std_dev, np.std(failure_times, ddof=1))

    def test_lognormal_closed_form(self, failure_times):
        """Test moments of the log times."""
        result = estimate_parameters("Lognormal", failure_times, method="MLE")
        logs = np.log(failure_times)

        assert_allclose(result.parameters.mean, np.mean(logs))
        assert_allclose(result.parameters.std_dev, np.std(logs, ddof=1))

    def test_single_failure_std_uses_n(self):
        """With one failure the standard deviation uses n, giving zero."""
        result = estimate_parameters("Normal", [250.0], method="MLE")
        assert result.parameters.mean == 250.0
        assert result.parameters.std_dev == 0.0

    def test_exponential_uses_all_times(self, censored_data):
        """λ = 1 / mean over failures and suspensions."""
        failures = censored_data["failures"]
        suspensions = censored_data["suspensions"]
        result = estimate_parameters("Exponential", failures, suspensions, method="MLE")

        assert_allclose(result.parameters.rate, 1.0 / np.mean(failures + suspensions))

    @pytest.mark.parametrize("distribution", ["Loglogistic", "Gumbel"])
    def test_numerical_mle_improves_on_srm(self, distribution, failure_times):
        """Numerical maximisation starts from SRM and can only improve it."""
        mle = estimate_parameters(distribution, failure_times, method="MLE")
        srm = estimate_parameters(distribution, failure_times, method="SRM")

        assert mle.provenance is EstimationMethod.MLE
        assert mle.log_likelihood >= srm.log_likelihood


class TestGroupedInput:
    """Test grouped counts."""

    def test_grouped_equals_expanded(self):
        """Grouped input gives the same result as the expanded times."""
        grouped = [{"time": 150, "qty": 2}, {"time": 210, "qty": 5}, {"time": 300, "qty": 1}]
        expanded = [150, 150, 210, 210, 210, 210, 210, 300]

        for method in ["SRM", "RRX", "MLE"]:
            from_groups = estimate_parameters("Weibull", grouped, method=method, is_grouped=True)
            from_times = estimate_parameters("Weibull", expanded, method=method)
            assert from_groups.parameters == from_times.parameters


class TestFindBestDistribution:
    """Test best-distribution selection."""

    def test_ranked_by_log_likelihood(self, failure_times):
        """Test ordering and the reported winner."""
        result = find_best_distribution(failure_times)

        assert len(result.results) == len(Distribution)
        likelihoods = [fit.log_likelihood for fit in result.results]
        assert all(a >= b for a, b in zip(likelihoods, likelihoods[1:]))
        assert result.best is result.results[0].distribution

    def test_each_fit_is_srm(self, censored_data):
        """Each entry matches a direct SRM fit of the same family."""
        failures = censored_data["failures"]
        suspensions = censored_data["suspensions"]
        result = find_best_distribution(failures, suspensions)

        for fit in result.results:
            direct = estimate_by_rank_regression(fit.distribution, failures, suspensions)
            assert fit.parameters == direct.parameters

    def test_no_usable_fit(self):
        """Test a single failure: nothing can be fitted."""
        result = find_best_distribution([100.0])

        assert result.best is None
        assert all(fit.parameters is None for fit in result.results)
        assert result.to_dict()["best"] is None
