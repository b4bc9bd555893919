"""
Appointment Booking API

A FastAPI backend for registering patients, listing half-hour slots and
booking each slot at most once.
"""

__version__ = "1.0.0"
