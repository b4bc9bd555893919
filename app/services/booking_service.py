"""
Booking transaction engine.

A slot moves from open to claimed exactly once. ``claim_slot`` reads the slot
inside a transaction as a fast path, but the unique key on
``bookings.slot_id`` is what decides a race: an ``IntegrityError`` at commit
with a booking now present means another transaction claimed the slot first.
"""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import List, Optional
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from ..models.booking import Booking
from ..models.slot import Slot
from ..models.user import User

logger = logging.getLogger(__name__)


class ClaimOutcome(str, Enum):
    BOOKED = "booked"
    SLOT_NOT_FOUND = "slot_not_found"
    SLOT_TAKEN = "slot_taken"
    USER_NOT_FOUND = "user_not_found"


@dataclass(frozen=True)
class ClaimResult:
    outcome: ClaimOutcome
    booking: Optional[Booking] = None

    @classmethod
    def booked(cls, booking: Booking) -> "ClaimResult":
        return cls(ClaimOutcome.BOOKED, booking)

    @classmethod
    def not_found(cls) -> "ClaimResult":
        return cls(ClaimOutcome.SLOT_NOT_FOUND)

    @classmethod
    def taken(cls) -> "ClaimResult":
        return cls(ClaimOutcome.SLOT_TAKEN)

    @classmethod
    def user_not_found(cls) -> "ClaimResult":
        return cls(ClaimOutcome.USER_NOT_FOUND)


class BookingService:
    def __init__(self, db: Session):
        self.db = db

    def claim_slot(self, user_id: str, slot_id: str) -> ClaimResult:
        """Create the booking for ``slot_id`` unless someone already holds it."""
        try:
            # FOR UPDATE serialises claimants of one slot where the backend
            # supports row locks; SQLite ignores it and relies on the unique key
            slot = (
                self.db.query(Slot)
                .filter(Slot.id == slot_id)
                .with_for_update()
                .first()
            )
            if slot is None:
                self.db.rollback()
                return ClaimResult.not_found()

            if self._slot_is_taken(slot_id):
                self.db.rollback()
                logger.info(f"Slot {slot_id} already booked, rejecting user {user_id}")
                return ClaimResult.taken()

            booking = Booking(user_id=user_id, slot_id=slot_id)
            self.db.add(booking)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            # Only a booking that now exists makes this a lost race; a dangling
            # user reference fails the foreign key instead
            if self._has_booking(slot_id):
                logger.info(f"Lost race for slot {slot_id}, rejecting user {user_id}")
                return ClaimResult.taken()
            if self.db.get(User, user_id) is None:
                logger.warning(f"Booking attempt by unknown user {user_id}")
                return ClaimResult.user_not_found()
            raise
        except Exception:
            self.db.rollback()
            raise

        booking = (
            self.db.query(Booking)
            .options(joinedload(Booking.slot))
            .filter(Booking.id == booking.id)
            .one()
        )
        logger.info(f"User {user_id} booked slot {slot_id} as booking {booking.id}")
        return ClaimResult.booked(booking)

    def _slot_is_taken(self, slot_id: str) -> bool:
        return self._has_booking(slot_id)

    def _has_booking(self, slot_id: str) -> bool:
        return (
            self.db.query(Booking.id).filter(Booking.slot_id == slot_id).first()
            is not None
        )

    def list_slots(
        self,
        start: datetime,
        end: datetime,
        only_available: bool = False,
    ) -> List[Slot]:
        """Slots starting within [start, end], ordered by start time."""
        query = (
            self.db.query(Slot)
            .options(joinedload(Slot.booking))
            .filter(Slot.start_at >= start, Slot.start_at <= end)
        )
        if only_available:
            query = query.filter(~Slot.booking.has())
        return query.order_by(Slot.start_at.asc()).all()

    def list_available_slots(self, start: datetime, end: datetime) -> List[Slot]:
        return self.list_slots(start, end, only_available=True)

    def list_my_bookings(self, user_id: str) -> List[Booking]:
        return (
            self.db.query(Booking)
            .options(joinedload(Booking.slot))
            .filter(Booking.user_id == user_id)
            .order_by(Booking.created_at.desc())
            .all()
        )

    def list_all_bookings(self) -> List[Booking]:
        return (
            self.db.query(Booking)
            .options(joinedload(Booking.slot), joinedload(Booking.user))
            .order_by(Booking.created_at.desc())
            .all()
        )
