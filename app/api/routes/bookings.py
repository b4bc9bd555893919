from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...core.errors import SlotNotFoundError, SlotTakenError, UserNotFoundError
from ...core.security import Identity
from ...api.deps import get_admin, get_patient
from ...models.booking import Booking
from ...services.booking_service import BookingService, ClaimOutcome
from ...schemas.booking import (
    AdminBookingResponse, BookingRequest, BookingResponse, BookingUser, SlotSummary
)

router = APIRouter(tags=["Bookings"])


def _slot_summary(booking: Booking) -> SlotSummary:
    return SlotSummary(
        id=booking.slot.id,
        start_at=booking.slot.start_at,
        end_at=booking.slot.end_at,
    )


def to_booking_response(booking: Booking) -> BookingResponse:
    return BookingResponse(
        id=booking.id,
        user_id=booking.user_id,
        slot_id=booking.slot_id,
        created_at=booking.created_at,
        slot=_slot_summary(booking),
    )


def to_admin_booking_response(booking: Booking) -> AdminBookingResponse:
    return AdminBookingResponse(
        id=booking.id,
        user_id=booking.user_id,
        slot_id=booking.slot_id,
        created_at=booking.created_at,
        slot=_slot_summary(booking),
        user=BookingUser(
            id=booking.user.id,
            name=booking.user.name,
            email=booking.user.email,
        ),
    )


@router.post(
    "/book",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
)
def book_slot(
    booking_data: BookingRequest,
    identity: Identity = Depends(get_patient),
    db: Session = Depends(get_db),
):
    """Claim a slot for the calling patient."""
    result = BookingService(db).claim_slot(identity.user_id, booking_data.slot_id)

    if result.outcome is ClaimOutcome.BOOKED:
        return to_booking_response(result.booking)
    if result.outcome is ClaimOutcome.SLOT_NOT_FOUND:
        raise SlotNotFoundError()
    if result.outcome is ClaimOutcome.SLOT_TAKEN:
        raise SlotTakenError()
    if result.outcome is ClaimOutcome.USER_NOT_FOUND:
        raise UserNotFoundError()
    raise ValueError(f"Unhandled claim outcome: {result.outcome}")


@router.get("/my-bookings", response_model=List[BookingResponse])
def my_bookings(
    identity: Identity = Depends(get_patient),
    db: Session = Depends(get_db),
):
    """Bookings of the calling patient, newest first."""
    bookings = BookingService(db).list_my_bookings(identity.user_id)
    return [to_booking_response(booking) for booking in bookings]


@router.get("/all-bookings", response_model=List[AdminBookingResponse])
def all_bookings(
    identity: Identity = Depends(get_admin),
    db: Session = Depends(get_db),
):
    """Every booking with its patient (admin only)."""
    bookings = BookingService(db).list_all_bookings()
    return [to_admin_booking_response(booking) for booking in bookings]
