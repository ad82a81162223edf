"""
Test suite for eHealth Booking.

Route-level tests run against a throwaway SQLite database and the in-memory
session backend.
"""
import os

# Set environment for testing
os.environ["TESTING"] = "1"
