"""
Database models package
"""

from .event import Event, EventMode, EventTag
from .booking import Booking

__all__ = ["Event", "EventMode", "EventTag", "Booking"]
