"""
Lifetime distribution families.

Available Distributions:
- Weibull: shape β, scale η
- Normal: mean μ, standard deviation σ
- Lognormal: mean and standard deviation of ln(t)
- Exponential: failure rate λ
- Loglogistic: scale α, shape β
- Gumbel: location μ, scale σ

Usage:
    from lifedata.core.distributions import get_distribution, WeibullParameters

    family = get_distribution("Weibull")
    r = family.reliability(500.0, WeibullParameters(beta=2.0, eta=1000.0))
"""

from lifedata.core.distributions.base import (
    Distribution,
    DistributionParameters,
    LifeDistributionBase,
    RELIABILITY_FLOOR,
)
from lifedata.core.distributions.weibull import WeibullDistribution, WeibullParameters
from lifedata.core.distributions.normal import NormalDistribution, NormalParameters
from lifedata.core.distributions.lognormal import LognormalDistribution, LognormalParameters
from lifedata.core.distributions.exponential import ExponentialDistribution, ExponentialParameters
from lifedata.core.distributions.loglogistic import LoglogisticDistribution, LoglogisticParameters
from lifedata.core.distributions.gumbel import GumbelDistribution, GumbelParameters
from lifedata.core.distributions.factory import (
    DistributionFactory,
    get_distribution,
    list_distributions,
)

# Register all families on import
DistributionFactory.register_all()

__all__ = [
    # Base classes
    "Distribution",
    "DistributionParameters",
    "LifeDistributionBase",
    "DistributionFactory",
    "RELIABILITY_FLOOR",

    # Families and their parameters
    "WeibullDistribution",
    "WeibullParameters",
    "NormalDistribution",
    "NormalParameters",
    "LognormalDistribution",
    "LognormalParameters",
    "ExponentialDistribution",
    "ExponentialParameters",
    "LoglogisticDistribution",
    "LoglogisticParameters",
    "GumbelDistribution",
    "GumbelParameters",

    # Convenience functions
    "get_distribution",
    "list_distributions",
]
