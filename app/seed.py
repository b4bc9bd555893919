"""
Populate a database with demo accounts and a week of open slots.

Usage: ``python -m app.seed``
"""
from datetime import datetime, timedelta, timezone
import logging

from sqlalchemy.orm import Session

from .core.config import settings
from .core.database import Database
from .core.security import UserRole, get_password_hash
from .models.booking import Booking
from .models.slot import Slot
from .models.user import User
from .services.slot_service import SlotService, generate_day_slots

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "Passw0rd!"
DEMO_USERS = [
    ("Admin User", "admin@example.com", UserRole.ADMIN),
    ("Patient User", "patient@example.com", UserRole.PATIENT),
]
SEED_DAYS = 7


def upsert_user(db: Session, name: str, email: str, role: UserRole) -> User:
    user = db.query(User).filter(User.email == email).first()
    if user:
        return user

    user = User(
        name=name,
        email=email,
        password_hash=get_password_hash(DEMO_PASSWORD, settings.BCRYPT_ROUNDS),
        role=role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def seed(db: Session, days: int = SEED_DAYS) -> int:
    """Create demo users and replace all slots; returns the slot count."""
    for name, email, role in DEMO_USERS:
        user = upsert_user(db, name, email, role)
        logger.info(f"Seeded {role.value} user {user.email}")

    # Bookings reference slots, so they go first
    db.query(Booking).delete()
    db.query(Slot).delete()
    db.commit()

    today = datetime.now(timezone.utc).date()
    intervals = []
    for offset in range(days):
        intervals.extend(generate_day_slots(today + timedelta(days=offset)))

    slots = SlotService(db).create_slots(intervals)
    logger.info(f"Seeded {len(slots)} slots for the next {days} days")
    return len(slots)


def main():
    logging.basicConfig(level=logging.INFO)
    database = Database.from_settings(settings)
    database.create_all()

    db = database.session()
    try:
        seed(db)
    finally:
        db.close()
        database.dispose()


if __name__ == "__main__":
    main()
