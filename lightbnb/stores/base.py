"""
Store interface shared by the durable and ephemeral backends.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from lightbnb.schemas import (
    PropertyCreate,
    PropertyRecord,
    PropertySearchOptions,
    PropertyWithRating,
    ReservationWithProperty,
    UserRecord,
)


class Store(ABC):
    """
    Persistence backend for the query gateway.

    Inputs are already validated; ``password`` in ``create_user`` is already
    hashed. Not-found is ``None`` or an empty list, never an exception.
    """

    @abstractmethod
    async def get_user_by_email(self, email: str) -> Optional[UserRecord]:
        ...

    @abstractmethod
    async def get_user_by_id(self, user_id: int) -> Optional[UserRecord]:
        ...

    @abstractmethod
    async def create_user(self, name: str, email: str, password: str) -> UserRecord:
        ...

    @abstractmethod
    async def list_past_reservations(self, guest_id: int, limit: int) -> List[ReservationWithProperty]:
        ...

    @abstractmethod
    async def list_properties(self, options: PropertySearchOptions, limit: int) -> List[PropertyWithRating]:
        ...

    @abstractmethod
    async def create_property(self, property_in: PropertyCreate) -> PropertyRecord:
        ...

    async def close(self) -> None:
        """Release any resources held by the backend."""
