"""
Reference IDs - human-readable identifiers for shops and catalog entries.

Format: <PREFIX>-<DISTRICT_CODE>-<COUNT>, e.g. "PRD-MAN-024".
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal, cast

EntityPrefix = Literal["SHP", "PRD", "MNU", "SRV", "OFF"]

PREFIXES: tuple[EntityPrefix, ...] = ("SHP", "PRD", "MNU", "SRV", "OFF")

ENTITY_NAMES: dict[EntityPrefix, str] = {
    "SHP": "Shop",
    "PRD": "Product",
    "MNU": "Menu Item",
    "SRV": "Service",
    "OFF": "Office",
}

ENTITY_PATHS: dict[EntityPrefix, str] = {
    "SHP": "shop",
    "PRD": "product",
    "MNU": "menu",
    "SRV": "service",
    "OFF": "office",
}

ITEM_TYPE_PREFIXES: dict[str, EntityPrefix] = {
    "product": "PRD",
    "menu": "MNU",
    "service": "SRV",
}

_NON_ALPHA = re.compile(r"[^A-Z]")


@dataclass(frozen=True)
class ParsedReferenceId:
    prefix: EntityPrefix
    district_code: str
    count: int


def district_code(district: str) -> str:
    """First three letters of the district, padded with X."""
    letters = _NON_ALPHA.sub("", district.upper())
    return letters[:3].ljust(3, "X")


def generate_reference_id(prefix: EntityPrefix, district: str, count: int) -> str:
    """
    Build a reference ID from the number of existing entities in the district.

    The sequence number is count + 1, zero-padded to three digits.
    """
    if prefix not in PREFIXES:
        raise ValueError(f"Unknown reference prefix: {prefix}")
    return f"{prefix}-{district_code(district)}-{count + 1:03d}"


def parse_reference_id(reference_id: str) -> ParsedReferenceId | None:
    parts = reference_id.split("-")
    if len(parts) != 3:
        return None

    prefix, code, count_str = parts
    if prefix not in PREFIXES or not count_str.isdigit():
        return None

    return ParsedReferenceId(
        prefix=cast(EntityPrefix, prefix),
        district_code=code,
        count=int(count_str),
    )


def is_valid_reference_id(reference_id: str) -> bool:
    return parse_reference_id(reference_id) is not None


def entity_type_for(reference_id: str) -> str:
    parsed = parse_reference_id(reference_id)
    if parsed is None:
        return "Unknown"
    return ENTITY_NAMES[parsed.prefix]


def entity_path_for(reference_id: str) -> str:
    """URL path for the entity, or "/" when the ID is malformed."""
    parsed = parse_reference_id(reference_id)
    if parsed is None:
        return "/"
    return f"/{ENTITY_PATHS[parsed.prefix]}/{reference_id}"


def prefix_for_item_type(item_type: str) -> EntityPrefix:
    return ITEM_TYPE_PREFIXES.get(item_type, "PRD")
