from sqlalchemy import Column, String, DateTime, CheckConstraint
from sqlalchemy.orm import relationship

from ..core.database import Base
from .types import new_id, utcnow


class Slot(Base):
    __tablename__ = "slots"

    id = Column(String(36), primary_key=True, default=new_id)
    start_at = Column(DateTime(timezone=True), nullable=False, index=True)
    end_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    # At most one booking per slot; enforced by the unique key on bookings.slot_id
    booking = relationship("Booking", back_populates="slot", uselist=False)

    __table_args__ = (
        CheckConstraint("end_at > start_at", name="ck_slots_end_after_start"),
    )

    @property
    def is_available(self) -> bool:
        return self.booking is None

    def __repr__(self):
        return f"<Slot(id={self.id}, start_at='{self.start_at}', end_at='{self.end_at}')>"
