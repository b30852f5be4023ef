"""
WhatsApp booking messages and deep links.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from urllib.parse import quote

from samankhojo.domain.entities import BookingLine

_NON_DIGIT = re.compile(r"\D")


def booking_message(
    customer_name: str,
    customer_phone: str | None,
    lines: Iterable[BookingLine],
    source: str,
) -> str:
    customer = customer_name + (f" ({customer_phone})" if customer_phone else "")
    items = "\n".join(f"• {line.item_name} - {line.quantity} {line.unit}" for line in lines)
    return (
        "🛍️ New Booking Request\n\n"
        f"Customer: {customer}\n\n"
        "Items:\n"
        f"{items}\n\n"
        "📝 Please confirm availability and total amount.\n\n"
        f"Source: {source}\n"
        "Thank you! 🙏"
    )


def whatsapp_link(phone: str, message: str) -> str:
    """wa.me deep link; the phone keeps digits only, the text is URL-encoded."""
    return f"https://wa.me/{_NON_DIGIT.sub('', phone)}?text={quote(message, safe='')}"
