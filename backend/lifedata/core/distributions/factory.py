"""
Registry for lifetime distribution families.

The DistributionFactory maps each Distribution member to its family
implementation so that estimation and evaluation code can dispatch on a
name coming from the dashboard.
"""

from typing import Any, Dict, List, Type
import logging

from lifedata.core.distributions.base import Distribution, LifeDistributionBase


logger = logging.getLogger(__name__)


class DistributionFactory:
    """
    Factory for lifetime distribution families.

    Usage:
        family = DistributionFactory.get_distribution("Weibull")
        r = family.reliability(500.0, WeibullParameters(beta=2.0, eta=1000.0))

        # Families available for fitting
        available = DistributionFactory.list_distributions()
    """

    # Registry for family classes
    _families: Dict[Distribution, Type[LifeDistributionBase]] = {}

    # Families hold no state, so one shared instance each is enough
    _instances: Dict[Distribution, LifeDistributionBase] = {}

    @classmethod
    def register_distribution(
        cls,
        distribution: Distribution,
        family_class: Type[LifeDistributionBase]
    ) -> None:
        """
        Register a family implementation.

        Raises:
            TypeError: If family_class doesn't inherit from LifeDistributionBase
        """
        if not issubclass(family_class, LifeDistributionBase):
            raise TypeError(
                f"Distribution class must inherit from LifeDistributionBase, "
                f"got {family_class.__name__}"
            )

        if distribution in cls._families:
            logger.warning(
                f"Distribution '{distribution.value}' is already registered. "
                f"Overwriting with {family_class.__name__}"
            )

        cls._families[distribution] = family_class
        cls._instances.pop(distribution, None)
        logger.debug(f"Registered distribution '{distribution.value}' -> {family_class.__name__}")

    @classmethod
    def get_distribution(cls, name: Any) -> LifeDistributionBase:
        """
        Get the family implementation for a Distribution or its name.

        Raises:
            ValueError: If the name is unknown or not registered
        """
        if not cls._families:
            cls.register_all()

        distribution = Distribution.parse(name)
        if distribution not in cls._families:
            available = ", ".join(cls.list_distributions())
            raise ValueError(
                f"Distribution '{distribution.value}' is not registered. "
                f"Available distributions: {available}"
            )

        if distribution not in cls._instances:
            cls._instances[distribution] = cls._families[distribution]()
        return cls._instances[distribution]

    @classmethod
    def list_distributions(cls) -> List[str]:
        """List registered family names in registration order."""
        if not cls._families:
            cls.register_all()
        return [distribution.value for distribution in cls._families]

    @classmethod
    def get_distribution_info(cls, name: Any) -> Dict[str, Any]:
        """
        Describe a registered family: name, class, equation and the
        parameter keys its fitted results carry.
        """
        family = cls.get_distribution(name)
        return {
            "name": family.get_name(),
            "class": type(family).__name__,
            "equation": family.get_equation(),
            "parameters": list(family.parameter_class.__dataclass_fields__),
        }

    @classmethod
    def register_all(cls) -> None:
        """Register all built-in families."""
        # Import here to avoid circular imports
        from lifedata.core.distributions.weibull import WeibullDistribution
        from lifedata.core.distributions.normal import NormalDistribution
        from lifedata.core.distributions.lognormal import LognormalDistribution
        from lifedata.core.distributions.exponential import ExponentialDistribution
        from lifedata.core.distributions.loglogistic import LoglogisticDistribution
        from lifedata.core.distributions.gumbel import GumbelDistribution

        cls.register_distribution(Distribution.WEIBULL, WeibullDistribution)
        cls.register_distribution(Distribution.NORMAL, NormalDistribution)
        cls.register_distribution(Distribution.LOGNORMAL, LognormalDistribution)
        cls.register_distribution(Distribution.EXPONENTIAL, ExponentialDistribution)
        cls.register_distribution(Distribution.LOGLOGISTIC, LoglogisticDistribution)
        cls.register_distribution(Distribution.GUMBEL, GumbelDistribution)

        logger.info(f"Registered {len(cls._families)} lifetime distributions")


# Convenience functions for common operations
def get_distribution(name: Any) -> LifeDistributionBase:
    """Convenience function to get a family implementation."""
    return DistributionFactory.get_distribution(name)


def list_distributions() -> List[str]:
    """Convenience function to list all available families."""
    return DistributionFactory.list_distributions()
