"""
Core algorithms package for life-data reliability analysis.

This package provides:
- Rank estimation with suspensions (Johnson adjusted ranks)
- Rank regression (SRM / RRX) and maximum likelihood fitting
- Lifetime distribution families
- Reliability function evaluation
- Fisher-matrix confidence bounds
- Weibull life metrics
- Maintenance optimization and Monte Carlo simulation
"""

from . import special
from . import ranks
from . import regression
from . import distributions
from . import weibull
from . import fitting
from . import reliability
from . import confidence
from . import maintenance

__all__ = [
    'special',
    'ranks',
    'regression',
    'distributions',
    'weibull',
    'fitting',
    'reliability',
    'confidence',
    'maintenance',
]
