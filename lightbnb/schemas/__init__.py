"""
Pydantic schemas for gateway inputs and the records it returns.
"""

from lightbnb.schemas.user import UserCreate, UserRecord
from lightbnb.schemas.property import (
    PropertyCreate,
    PropertyRecord,
    PropertySearchOptions,
    PropertyWithRating,
    dollars_to_cents,
)
from lightbnb.schemas.reservation import ReservationWithProperty

__all__ = [
    "UserCreate",
    "UserRecord",
    "PropertyCreate",
    "PropertyRecord",
    "PropertySearchOptions",
    "PropertyWithRating",
    "ReservationWithProperty",
    "dollars_to_cents",
]
