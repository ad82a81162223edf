"""
eHealth Booking

A small FastAPI application where patients register, log in, browse doctors
and book or cancel their own appointments, guarded by server-side sessions.
"""

__version__ = "1.0.0"
