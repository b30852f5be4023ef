"""
Bag component - Per-user shopping bag.
"""

from ._impl import BagService, build_view, group_by_shop
from .models import AddToBagInput, BagShopGroup, BagValidationError, BagView
from .ports import BagRepoPort

__all__ = [
    "BagService",
    "BagRepoPort",
    "AddToBagInput",
    "BagShopGroup",
    "BagView",
    "BagValidationError",
    "build_view",
    "group_by_shop",
]
