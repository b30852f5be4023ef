"""
Shops component - Shop directory and listing.
"""

from ._impl import ShopService, group_items, validate_shop_data
from .models import (
    ItemGroup,
    ShopDetails,
    ShopListing,
    ShopQuery,
    ShopSort,
    ShopValidationError,
)
from .ports import ShopRepoPort

__all__ = [
    "ShopService",
    "ShopRepoPort",
    "ShopQuery",
    "ShopSort",
    "ShopListing",
    "ShopDetails",
    "ItemGroup",
    "ShopValidationError",
    "group_items",
    "validate_shop_data",
]
