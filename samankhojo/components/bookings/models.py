"""
Bookings component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass

from samankhojo.domain.entities import Booking


@dataclass(frozen=True)
class BookingValidationError:
    """Booking validation error."""

    code: str
    message: str
    field: str | None = None


# --- Input Models ---


@dataclass(frozen=True)
class CustomerInfo:
    user_id: str
    user_name: str | None = None
    user_phone: str | None = None
    user_agent: str | None = None


@dataclass(frozen=True)
class DirectBookingLine:
    name: str
    quantity: int
    unit: str
    item_id: str | None = None
    price: float | None = None


@dataclass(frozen=True)
class DirectBookingInput:
    shop_id: str
    shop_name: str
    items: tuple[DirectBookingLine, ...]


# --- Output Models ---


@dataclass(frozen=True)
class WhatsAppLink:
    shop_id: str
    shop_name: str
    shop_phone: str
    whatsapp_link: str
    item_count: int
    total_quantity: int


@dataclass(frozen=True)
class ConfirmBagOutput:
    booking: Booking
    links: tuple[WhatsAppLink, ...]
    skipped_shop_ids: tuple[str, ...]
