"""
BookingService - Booking via WhatsApp deep links.

Confirming a bag splits it into one section per shop, each with its own
pre-filled WhatsApp message. Shops that no longer exist or have no phone
number are skipped. When no shop is bookable the bag is left untouched.
"""

from __future__ import annotations

import logging
from typing import cast
from uuid import UUID, uuid4

from samankhojo.domain.entities import BagItem, Booking, BookingLine, BookingShop, BookingStatus
from samankhojo.rules.models import BookingRules

from ._messages import booking_message, whatsapp_link
from .models import (
    BookingValidationError,
    ConfirmBagOutput,
    CustomerInfo,
    DirectBookingInput,
    WhatsAppLink,
)
from .ports import BagStorePort, BookingRepoPort, ClockPort, ShopLookupPort

logger = logging.getLogger(__name__)


def _as_uuid(value: str) -> UUID | None:
    try:
        return UUID(value)
    except ValueError:
        return None


def _not_found(booking_id: UUID) -> BookingValidationError:
    return BookingValidationError(
        code="booking_not_found", message=f"Booking with ID {booking_id} not found"
    )


class BookingService:
    def __init__(
        self,
        repo: BookingRepoPort,
        bags: BagStorePort,
        shops: ShopLookupPort,
        clock: ClockPort,
        rules: BookingRules,
    ) -> None:
        self._repo = repo
        self._bags = bags
        self._shops = shops
        self._clock = clock
        self._rules = rules

    def get_by_id(self, booking_id: UUID) -> Booking | None:
        return self._repo.get_by_id(booking_id)

    def _shop_phone(self, shop_id: str) -> str | None:
        parsed = _as_uuid(shop_id)
        shop = self._shops.get_by_id(parsed) if parsed else None
        return shop.phone if shop and shop.phone else None

    def confirm_bag(
        self, customer: CustomerInfo
    ) -> tuple[ConfirmBagOutput | None, list[BookingValidationError]]:
        """
        Turn the customer's bag into a booking.

        Returns:
            Tuple of (output, errors). Output is None if nothing could be booked.
        """
        bag = self._bags.get(customer.user_id)
        if bag is None or not bag.items:
            return None, [BookingValidationError(code="bag_empty", message="Bag is empty")]

        groups: dict[str, list[BagItem]] = {}
        for entry in bag.items:
            groups.setdefault(entry.shop_id, []).append(entry)

        name = customer.user_name or self._rules.default_customer_name
        sections: list[BookingShop] = []
        links: list[WhatsAppLink] = []
        skipped: list[str] = []

        for shop_id, entries in groups.items():
            phone = self._shop_phone(shop_id)
            if phone is None:
                logger.warning("Shop %s not found or missing phone number; skipping", shop_id)
                skipped.append(shop_id)
                continue

            lines = [
                BookingLine(
                    item_id=e.item_id,
                    item_name=e.item_name,
                    quantity=e.quantity,
                    unit=e.unit,
                    price=e.price,
                )
                for e in entries
            ]
            link = whatsapp_link(
                phone, booking_message(name, customer.user_phone, lines, self._rules.source)
            )
            sections.append(
                BookingShop(
                    shop_id=shop_id,
                    shop_name=entries[0].shop_name,
                    shop_phone=phone,
                    items=lines,
                    whatsapp_link=link,
                )
            )
            links.append(
                WhatsAppLink(
                    shop_id=shop_id,
                    shop_name=entries[0].shop_name,
                    shop_phone=phone,
                    whatsapp_link=link,
                    item_count=len(entries),
                    total_quantity=sum(e.quantity for e in entries),
                )
            )

        if not sections:
            return None, [
                BookingValidationError(
                    code="no_bookable_shops",
                    message="None of the shops in the bag can take bookings",
                )
            ]

        now = self._clock.now_utc()
        booking = Booking(
            id=uuid4(),
            user_id=customer.user_id,
            user_name=name,
            user_phone=customer.user_phone,
            shops=sections,
            total_shops=len(sections),
            total_items=sum(line.quantity for s in sections for line in s.items),
            status="pending",
            source=self._rules.source,
            user_agent=customer.user_agent,
            created_at=now,
            updated_at=now,
        )
        saved = self._repo.save(booking)
        self._bags.delete(customer.user_id)

        logger.info(
            "Booking %s confirmed for %s across %d shop(s)", saved.id, customer.user_id, len(sections)
        )
        return ConfirmBagOutput(booking=saved, links=tuple(links), skipped_shop_ids=tuple(skipped)), []

    def create_direct(
        self, customer: CustomerInfo, inp: DirectBookingInput
    ) -> tuple[Booking | None, list[BookingValidationError]]:
        """Single-shop booking without going through the bag."""
        errors: list[BookingValidationError] = []
        if not inp.shop_id or not inp.shop_name:
            errors.append(
                BookingValidationError(code="shop_required", message="Shop ID and name are required", field="shop_id")
            )
        if not inp.items:
            errors.append(
                BookingValidationError(
                    code="items_required", message="Items array is required and cannot be empty", field="items"
                )
            )
        for line in inp.items:
            if not line.name.strip() or line.quantity < 1 or not line.unit.strip():
                errors.append(
                    BookingValidationError(
                        code="item_invalid",
                        message="Each item must have name, quantity, and unit",
                        field="items",
                    )
                )
                break
        if errors:
            return None, errors

        lines = [
            BookingLine(
                item_id=line.item_id,
                item_name=line.name.strip(),
                quantity=line.quantity,
                unit=line.unit,
                price=line.price,
            )
            for line in inp.items
        ]
        name = customer.user_name or self._rules.default_customer_name
        phone = self._shop_phone(inp.shop_id)
        link = (
            whatsapp_link(phone, booking_message(name, customer.user_phone, lines, self._rules.source))
            if phone
            else None
        )

        now = self._clock.now_utc()
        booking = Booking(
            id=uuid4(),
            user_id=customer.user_id,
            user_name=name,
            user_phone=customer.user_phone,
            shops=[
                BookingShop(
                    shop_id=inp.shop_id,
                    shop_name=inp.shop_name,
                    shop_phone=phone,
                    items=lines,
                    whatsapp_link=link,
                )
            ],
            total_shops=1,
            total_items=sum(line.quantity for line in lines),
            status="pending",
            source=self._rules.source,
            user_agent=customer.user_agent,
            created_at=now,
            updated_at=now,
        )
        return self._repo.save(booking), []

    def history(
        self, user_id: str, status: str | None = None, limit: int = 20
    ) -> list[Booking]:
        bookings = self._repo.list_by_user(user_id)
        if status:
            bookings = [b for b in bookings if b.status == status]
        bookings.sort(key=lambda b: b.created_at, reverse=True)
        return bookings[:limit]

    def list_all(self, status: str | None = None, limit: int = 100) -> list[Booking]:
        bookings = self._repo.get_all()
        if status:
            bookings = [b for b in bookings if b.status == status]
        bookings.sort(key=lambda b: b.created_at, reverse=True)
        return bookings[:limit]

    def transition(
        self, booking_id: UUID, new_status: str
    ) -> tuple[Booking | None, list[BookingValidationError]]:
        """Move a booking to a new status if the transition table allows it."""
        booking = self._repo.get_by_id(booking_id)
        if not booking:
            return None, [_not_found(booking_id)]

        allowed = self._rules.transitions.get(booking.status, [])
        if new_status not in allowed:
            return None, [
                BookingValidationError(
                    code="invalid_transition",
                    message=f"Cannot move booking from {booking.status} to {new_status}",
                    field="status",
                )
            ]

        status = cast(BookingStatus, new_status)
        booking.status = status
        for section in booking.shops:
            section.status = status
        booking.updated_at = self._clock.now_utc()
        saved = self._repo.save(booking)
        logger.info("Booking %s moved to %s", booking_id, new_status)
        return saved, []
