from datetime import date, datetime, time, timedelta, timezone
from typing import Iterable, List, Tuple
import logging

from sqlalchemy.orm import Session

from ..models.slot import Slot

logger = logging.getLogger(__name__)

SLOT_LENGTH = timedelta(minutes=30)
DAY_START = time(9, 0)
DAY_END = time(17, 0)


def generate_day_slots(
    day: date,
    start: time = DAY_START,
    end: time = DAY_END,
    length: timedelta = SLOT_LENGTH,
) -> List[Tuple[datetime, datetime]]:
    """Half-hour (start, end) pairs in UTC covering [start, end) of ``day``."""
    cursor = datetime.combine(day, start, tzinfo=timezone.utc)
    stop = datetime.combine(day, end, tzinfo=timezone.utc)

    slots = []
    while cursor + length <= stop:
        slots.append((cursor, cursor + length))
        cursor += length
    return slots


def day_window(first: date, last: date) -> Tuple[datetime, datetime]:
    """From 00:00:00 of ``first`` to the last microsecond of ``last``, UTC."""
    start = datetime.combine(first, time.min, tzinfo=timezone.utc)
    end = datetime.combine(last, time.max, tzinfo=timezone.utc)
    return start, end


class SlotService:
    def __init__(self, db: Session):
        self.db = db

    def create_slots(self, intervals: Iterable[Tuple[datetime, datetime]]) -> List[Slot]:
        slots = []
        for start_at, end_at in intervals:
            if end_at <= start_at:
                raise ValueError(f"Slot must end after it starts: {start_at} - {end_at}")
            slots.append(Slot(start_at=start_at, end_at=end_at))

        self.db.add_all(slots)
        self.db.commit()
        logger.info(f"Created {len(slots)} slots")
        return slots

    def create_day_slots(self, day: date) -> List[Slot]:
        return self.create_slots(generate_day_slots(day))
