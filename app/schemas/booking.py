from pydantic import Field

from .base import CamelModel, UtcDateTime


class BookingRequest(CamelModel):
    slot_id: str = Field(..., min_length=1, max_length=64)


class SlotResponse(CamelModel):
    id: str
    start_at: UtcDateTime
    end_at: UtcDateTime
    available: bool


class SlotSummary(CamelModel):
    id: str
    start_at: UtcDateTime
    end_at: UtcDateTime


class BookingUser(CamelModel):
    id: str
    name: str
    email: str


class BookingResponse(CamelModel):
    id: str
    user_id: str
    slot_id: str
    created_at: UtcDateTime
    slot: SlotSummary


class AdminBookingResponse(BookingResponse):
    user: BookingUser
