"""
Bookings component - Booking via WhatsApp and status tracking.
"""

from ._impl import BookingService
from ._messages import booking_message, whatsapp_link
from .models import (
    BookingValidationError,
    ConfirmBagOutput,
    CustomerInfo,
    DirectBookingInput,
    DirectBookingLine,
    WhatsAppLink,
)
from .ports import BookingRepoPort

__all__ = [
    "BookingService",
    "BookingRepoPort",
    "BookingValidationError",
    "ConfirmBagOutput",
    "CustomerInfo",
    "DirectBookingInput",
    "DirectBookingLine",
    "WhatsAppLink",
    "booking_message",
    "whatsapp_link",
]
