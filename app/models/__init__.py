from .user import User
from .slot import Slot
from .booking import Booking

__all__ = ["User", "Slot", "Booking"]
