from datetime import date, datetime, timedelta, timezone
from typing import List, Optional, Union

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...services.booking_service import BookingService
from ...services.slot_service import day_window
from ...schemas.booking import SlotResponse

router = APIRouter(prefix="/slots", tags=["Slots"])

DEFAULT_WINDOW_DAYS = 7


def utc_day(value: Union[datetime, date]) -> date:
    """Calendar day in UTC; naive datetimes are taken as UTC."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    return value


@router.get("", response_model=List[SlotResponse])
def list_slots(
    from_: Optional[Union[datetime, date]] = Query(None, alias="from"),
    to: Optional[Union[datetime, date]] = Query(None),
    available: bool = Query(False),
    db: Session = Depends(get_db),
):
    """Slots in a day range; defaults to the next seven days."""
    today = datetime.now(timezone.utc).date()
    first = utc_day(from_) if from_ is not None else today
    last = utc_day(to) if to is not None else today + timedelta(days=DEFAULT_WINDOW_DAYS)
    if last < first:
        return []

    start, end = day_window(first, last)
    service = BookingService(db)
    slots = service.list_slots(start, end, only_available=available)

    return [
        SlotResponse(
            id=slot.id,
            start_at=slot.start_at,
            end_at=slot.end_at,
            available=slot.is_available,
        )
        for slot in slots
    ]
