"""
Pydantic schemas for user creation and user records.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, validator


class UserCreate(BaseModel):
    """Schema for creating a new user."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="User's display name",
        examples=["Devin Sanders"]
    )

    email: EmailStr = Field(
        ...,
        description="User's email address",
        examples=["sebastianguerra@ymail.com"]
    )

    password: str = Field(
        ...,
        min_length=1,
        max_length=128,
        description="Plain password, or an existing bcrypt hash"
    )

    @validator("name")
    def validate_name(cls, v):
        """Strip surrounding whitespace and reject blank names."""
        if not v.strip():
            raise ValueError("Name cannot be empty")
        return v.strip()

    @validator("email")
    def normalize_email(cls, v):
        """Normalize email to lowercase."""
        return v.lower().strip()


class UserRecord(BaseModel):
    """A row of the users table as returned to callers."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    password: str = Field(..., description="Bcrypt hash of the user's password")
