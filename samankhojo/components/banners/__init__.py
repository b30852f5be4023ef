"""
Banners component - Standalone promotional banners.
"""

from ._impl import POSITIONS, BannerService, validate_banner_data
from .models import BannerValidationError
from .ports import BannerRepoPort

__all__ = [
    "BannerService",
    "BannerRepoPort",
    "BannerValidationError",
    "POSITIONS",
    "validate_banner_data",
]
