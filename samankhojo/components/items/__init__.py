"""
Items component - Products, menu items and services.
"""

from ._impl import (
    ItemService,
    item_matches,
    normalize_item_data,
    parse_price_range,
    split_csv,
    validate_item_data,
)
from .models import BulkCreateOutput, BulkRowError, ItemSearchOutput, ItemValidationError
from .ports import ItemRepoPort

__all__ = [
    "ItemService",
    "ItemRepoPort",
    "ItemValidationError",
    "BulkRowError",
    "BulkCreateOutput",
    "ItemSearchOutput",
    "item_matches",
    "normalize_item_data",
    "parse_price_range",
    "split_csv",
    "validate_item_data",
]
