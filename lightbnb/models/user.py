"""
User model with password hashing helpers.
Handles guest and owner accounts.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from lightbnb.database import Base
from passlib.context import CryptContext
from functools import lru_cache
from typing import List, TYPE_CHECKING

if TYPE_CHECKING:
    from lightbnb.models.property import Property
    from lightbnb.models.reservation import Reservation

BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")


@lru_cache()
def get_password_context(rounds: int = 12) -> CryptContext:
    """Password hashing context for the given bcrypt cost factor."""
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


class User(Base):
    """
    User model for guests and property owners.
    Email is unique; the password column stores a bcrypt hash.
    """

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="User's display name"
    )

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        comment="User email address - must be unique"
    )

    password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Bcrypt hashed password"
    )

    # Relationships
    properties: Mapped[List["Property"]] = relationship(
        "Property",
        back_populates="owner",
        lazy="noload"
    )

    reservations: Mapped[List["Reservation"]] = relationship(
        "Reservation",
        back_populates="guest",
        lazy="noload"
    )

    def __repr__(self) -> str:
        """String representation of the user."""
        return f"<User(id={self.id}, email={self.email})>"

    @classmethod
    def hash_password(cls, password: str, rounds: int = 12) -> str:
        """
        Hash a password using bcrypt.
        Values that already are bcrypt hashes are stored as given.
        """
        if not password:
            raise ValueError("Password cannot be empty")
        if cls.is_password_hash(password):
            return password
        return get_password_context(rounds).hash(password)

    @staticmethod
    def is_password_hash(value: str) -> bool:
        return value.startswith(BCRYPT_PREFIXES) and len(value) == 60

    @staticmethod
    def check_password(password: str, hashed_password: str) -> bool:
        """Verify a plain password against a stored hash."""
        if not password or not hashed_password:
            return False
        try:
            return get_password_context().verify(password, hashed_password)
        except ValueError:
            # Stored value is not a recognisable hash
            return False
