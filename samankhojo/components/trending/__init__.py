"""
Trending component - Admin-pinned and popular in-stock items.
"""

from ._impl import TrendingService, is_orderable
from .models import TrendingPick, TrendingValidationError
from .ports import TrendingRepoPort

__all__ = [
    "TrendingService",
    "TrendingRepoPort",
    "TrendingPick",
    "TrendingValidationError",
    "is_orderable",
]
