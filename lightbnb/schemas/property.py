"""
Pydantic schemas for properties: creation input, returned records and
the search options consumed by the property filter builder.
"""

from pydantic import BaseModel, ConfigDict, Field, validator
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Optional, Union


def dollars_to_cents(amount: Union[int, float, str, Decimal]) -> int:
    """Convert a dollar amount to integer cents without float rounding error."""
    cents = Decimal(str(amount)) * 100
    return int(cents.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class PropertyBase(BaseModel):
    """Fields shared by every property schema."""

    owner_id: int = Field(..., description="ID of the owning user")
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field("", description="Free text description")
    thumbnail_photo_url: str = Field(..., max_length=255)
    cover_photo_url: str = Field(..., max_length=255)
    cost_per_night: int = Field(..., ge=0, description="Nightly cost in cents")
    street: str = Field(..., max_length=255)
    city: str = Field(..., max_length=255)
    province: str = Field(..., max_length=255)
    post_code: str = Field(..., max_length=255)
    country: str = Field(..., max_length=255)
    parking_spaces: int = Field(0, ge=0)
    number_of_bathrooms: int = Field(0, ge=0)
    number_of_bedrooms: int = Field(0, ge=0)


class PropertyCreate(PropertyBase):
    """Schema for creating a new property listing."""

    @validator("title")
    def validate_title(cls, v):
        if not v.strip():
            raise ValueError("Title cannot be empty")
        return v.strip()

    @classmethod
    def from_listing_form(cls, form: Dict[str, Any]) -> "PropertyCreate":
        """
        Build from a listing form where the price is entered in dollars.

        Args:
            form: Submitted fields; ``cost_per_night`` is a dollar amount

        Returns:
            PropertyCreate with ``cost_per_night`` in cents
        """
        data = dict(form)
        if data.get("cost_per_night") not in (None, ""):
            data["cost_per_night"] = dollars_to_cents(data["cost_per_night"])
        return cls(**data)


class PropertyRecord(PropertyBase):
    """A row of the properties table as returned to callers."""

    model_config = ConfigDict(from_attributes=True)

    id: int


class PropertyWithRating(PropertyRecord):
    """Property row with the average of its review ratings (None when unreviewed)."""

    average_rating: Optional[float] = None

    @validator("average_rating", pre=True)
    def coerce_average(cls, v):
        # PostgreSQL returns NUMERIC averages as Decimal
        return float(v) if v is not None else None


class PropertySearchOptions(BaseModel):
    """
    Optional filters for listing properties.

    Prices are given in dollars and compared against ``cost_per_night`` in
    cents. Each price bound applies on its own when only one is supplied.
    Empty values count as not supplied.
    """

    city: Optional[str] = Field(None, description="Case-insensitive substring of the city")
    owner_id: Optional[int] = Field(None, description="Only properties of this owner")
    minimum_price_per_night: Optional[Decimal] = Field(None, ge=0, description="Inclusive lower bound in dollars")
    maximum_price_per_night: Optional[Decimal] = Field(None, ge=0, description="Inclusive upper bound in dollars")
    minimum_rating: Optional[float] = Field(None, ge=0, le=5, description="Minimum average rating")

    @validator("city", "minimum_price_per_night", "maximum_price_per_night", "minimum_rating", "owner_id", pre=True)
    def empty_to_none(cls, v):
        """Treat blank form values as missing."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @validator("city")
    def strip_city(cls, v):
        return v.strip() if v is not None else v

    @validator("minimum_rating")
    def zero_rating_to_none(cls, v):
        # A zero threshold filters nothing; unreviewed properties stay in
        return v or None

    @validator("maximum_price_per_night")
    def validate_price_range(cls, v, values):
        """Ensure max price is greater than or equal to min price."""
        minimum = values.get("minimum_price_per_night")
        if v is not None and minimum is not None and v < minimum:
            raise ValueError("Maximum price must be greater than or equal to minimum price")
        return v

    @property
    def minimum_cost_cents(self) -> Optional[int]:
        if self.minimum_price_per_night is None:
            return None
        return dollars_to_cents(self.minimum_price_per_night)

    @property
    def maximum_cost_cents(self) -> Optional[int]:
        if self.maximum_price_per_night is None:
            return None
        return dollars_to_cents(self.maximum_price_per_night)

    def has_filters(self) -> bool:
        """Check if any filter is set."""
        return any(
            value is not None
            for value in (
                self.city,
                self.owner_id,
                self.minimum_price_per_night,
                self.maximum_price_per_night,
                self.minimum_rating,
            )
        )
