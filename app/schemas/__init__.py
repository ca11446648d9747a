"""
Pydantic schemas package
"""

from .common import *
from .event import *
from .booking import *

__all__ = [
    "StandardResponse",
    "ErrorResponse",
    "EventCreate",
    "EventResponse",
    "EventSummary",
    "BookingCreate",
    "BookingUpdate",
    "BookingResponse",
]
