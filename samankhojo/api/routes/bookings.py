"""Booking routes: confirm the bag over WhatsApp, direct bookings and status changes."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from pydantic import BaseModel, Field

from samankhojo.api.deps import get_booking_service, get_current_admin, get_current_user, require_admin_budget
from samankhojo.api.errors import raise_for_errors
from samankhojo.components.bookings import (
    BookingService,
    CustomerInfo,
    DirectBookingInput,
    DirectBookingLine,
)
from samankhojo.domain.entities import Booking, BookingStatus, User

router = APIRouter()


# --- Request/Response Models ---


class ConfirmBagRequest(BaseModel):
    user_name: str | None = None
    user_phone: str | None = None


class DirectLineRequest(BaseModel):
    name: str
    quantity: int = Field(..., ge=1)
    unit: str = "piece"
    item_id: str | None = None
    price: float | None = None


class DirectBookingRequest(BaseModel):
    shop_id: str
    shop_name: str
    items: list[DirectLineRequest]
    user_name: str | None = None
    user_phone: str | None = None


class StatusRequest(BaseModel):
    status: BookingStatus


class WhatsAppLinkResponse(BaseModel):
    shop_id: str
    shop_name: str
    shop_phone: str
    whatsapp_link: str
    item_count: int
    total_quantity: int


class ConfirmBagResponse(BaseModel):
    booking: Booking
    links: list[WhatsAppLinkResponse]
    skipped_shop_ids: list[str]


class BookingListResponse(BaseModel):
    bookings: list[Booking]
    count: int


def _customer(user: User, request: Request, name: str | None, phone: str | None) -> CustomerInfo:
    return CustomerInfo(
        user_id=str(user.id),
        user_name=name or user.display_name,
        user_phone=phone or user.phone,
        user_agent=request.headers.get("user-agent"),
    )


# --- Routes ---


@router.post("/confirm-bag", response_model=ConfirmBagResponse, status_code=201)
def confirm_bag(
    request: Request,
    data: ConfirmBagRequest,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
) -> ConfirmBagResponse:
    """
    Turn the bag into a booking with one WhatsApp link per shop.

    Shops that are missing or have no phone are skipped. The bag is cleared
    only when at least one shop could be booked.
    """
    customer = _customer(current_user, request, data.user_name, data.user_phone)
    result, errors = service.confirm_bag(customer)
    if result is None:
        raise_for_errors(errors)
    return ConfirmBagResponse(
        booking=result.booking,
        links=[
            WhatsAppLinkResponse(
                shop_id=link.shop_id,
                shop_name=link.shop_name,
                shop_phone=link.shop_phone,
                whatsapp_link=link.whatsapp_link,
                item_count=link.item_count,
                total_quantity=link.total_quantity,
            )
            for link in result.links
        ],
        skipped_shop_ids=list(result.skipped_shop_ids),
    )


@router.post("", response_model=Booking, status_code=201)
def create_direct_booking(
    request: Request,
    data: DirectBookingRequest,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
) -> Booking:
    """Single-shop booking without the bag."""
    customer = _customer(current_user, request, data.user_name, data.user_phone)
    inp = DirectBookingInput(
        shop_id=data.shop_id,
        shop_name=data.shop_name,
        items=tuple(DirectBookingLine(**line.model_dump()) for line in data.items),
    )
    booking, errors = service.create_direct(customer, inp)
    if booking is None:
        raise_for_errors(errors)
    return booking


@router.get("/mine", response_model=BookingListResponse)
def booking_history(
    status_filter: BookingStatus | None = Query(None, alias="status"),
    limit: int = Query(20, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
) -> BookingListResponse:
    bookings = service.history(str(current_user.id), status_filter, limit)
    return BookingListResponse(bookings=bookings, count=len(bookings))


@router.get("", response_model=BookingListResponse)
def list_bookings(
    status_filter: BookingStatus | None = Query(None, alias="status"),
    limit: int = Query(100, ge=1, le=500),
    admin: User = Depends(get_current_admin),
    service: BookingService = Depends(get_booking_service),
) -> BookingListResponse:
    bookings = service.list_all(status_filter, limit)
    return BookingListResponse(bookings=bookings, count=len(bookings))


@router.get("/{booking_id}", response_model=Booking)
def get_booking(
    booking_id: UUID,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
) -> Booking:
    booking = service.get_by_id(booking_id)
    if booking is None:
        raise HTTPException(status_code=404, detail="Booking not found")
    if booking.user_id != str(current_user.id) and not current_user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
    return booking


@router.patch("/{booking_id}/status", response_model=Booking)
def update_booking_status(
    booking_id: UUID,
    data: StatusRequest,
    admin: User = Depends(require_admin_budget),
    service: BookingService = Depends(get_booking_service),
) -> Booking:
    """pending -> confirmed | cancelled, confirmed -> completed | cancelled."""
    booking, errors = service.transition(booking_id, data.status)
    if booking is None:
        raise_for_errors(errors)
    return booking
