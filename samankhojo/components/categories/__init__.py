"""
Categories component - The admin-managed list of shop categories.
"""

from ._impl import DIRECTIONS, CategoryService, validate_category_data
from .models import CategoryUsage, CategoryUsageReport, CategoryValidationError
from .ports import CategoryRepoPort, ShopListPort

__all__ = [
    "CategoryService",
    "CategoryRepoPort",
    "ShopListPort",
    "CategoryValidationError",
    "CategoryUsage",
    "CategoryUsageReport",
    "DIRECTIONS",
    "validate_category_data",
]
