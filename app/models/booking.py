from sqlalchemy import Column, String, ForeignKey, DateTime, UniqueConstraint
from sqlalchemy.orm import relationship

from ..core.database import Base
from .types import new_id, utcnow


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    slot_id = Column(String(36), ForeignKey("slots.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)

    # Relationships
    user = relationship("User", back_populates="bookings")
    slot = relationship("Slot", back_populates="booking")

    __table_args__ = (
        # The store, not the application, decides who wins a slot
        UniqueConstraint("slot_id", name="uq_bookings_slot_id"),
    )

    def __repr__(self):
        return f"<Booking(id={self.id}, user_id={self.user_id}, slot_id={self.slot_id})>"
