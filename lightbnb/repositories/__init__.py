"""
Repository layer for data access operations.
Each repository wraps one async session and builds parameterized statements.
"""

from lightbnb.repositories.base import BaseRepository
from lightbnb.repositories.property import PropertyRepository, PropertyQueryBuilder
from lightbnb.repositories.reservation import ReservationRepository
from lightbnb.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "PropertyRepository",
    "PropertyQueryBuilder",
    "ReservationRepository",
    "UserRepository",
]
