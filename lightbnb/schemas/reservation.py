"""
Pydantic schema for a guest's reservation joined to its property.
"""

from pydantic import ConfigDict, validator
from datetime import date
from typing import Optional

from lightbnb.schemas.property import PropertyBase


class ReservationWithProperty(PropertyBase):
    """
    Reservation row merged with the reserved property's columns and its
    average review rating. ``id`` is the reservation id.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int
    property_id: int
    guest_id: int
    start_date: date
    end_date: date
    average_rating: Optional[float] = None

    @validator("average_rating", pre=True)
    def coerce_average(cls, v):
        return float(v) if v is not None else None
