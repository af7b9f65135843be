"""
API routes package.
"""
from lifedata.api import analysis

__all__ = [
    "analysis"
]
