"""
Test suite for the Appointment Booking API.

Contains unit and integration tests for authentication, the booking
transaction and the HTTP surface.
"""
import os

# Cheap hashes for tests; must be set before app.core.security is imported
os.environ.setdefault("BCRYPT_ROUNDS", "4")
