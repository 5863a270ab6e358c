"""
Durable store backed by the SQL database.
Every call borrows one pooled session and returns it when the call finishes.
"""

from typing import List, Optional

from lightbnb.config import Settings
from lightbnb.database import Database
from lightbnb.repositories import PropertyRepository, ReservationRepository, UserRepository
from lightbnb.schemas import (
    PropertyCreate,
    PropertyRecord,
    PropertySearchOptions,
    PropertyWithRating,
    ReservationWithProperty,
    UserRecord,
)
from lightbnb.stores.base import Store


class DatabaseStore(Store):
    """Store implementation over a shared ``Database`` connection pool."""

    def __init__(self, database: Database, owns_database: bool = False):
        self.database = database
        self._owns_database = owns_database

    @classmethod
    def from_settings(cls, settings: Settings) -> "DatabaseStore":
        return cls(Database.from_settings(settings), owns_database=True)

    async def get_user_by_email(self, email: str) -> Optional[UserRecord]:
        async with self.database.session() as session:
            user = await UserRepository(session).get_by_email(email)
            return UserRecord.model_validate(user) if user else None

    async def get_user_by_id(self, user_id: int) -> Optional[UserRecord]:
        async with self.database.session() as session:
            user = await UserRepository(session).get_by_id(user_id)
            return UserRecord.model_validate(user) if user else None

    async def create_user(self, name: str, email: str, password: str) -> UserRecord:
        async with self.database.session() as session:
            user = await UserRepository(session).create_user(
                {"name": name, "email": email, "password": password}
            )
            return UserRecord.model_validate(user)

    async def list_past_reservations(self, guest_id: int, limit: int) -> List[ReservationWithProperty]:
        async with self.database.session() as session:
            rows = await ReservationRepository(session).get_past_reservations(guest_id, limit)
            return [ReservationWithProperty.model_validate(dict(row)) for row in rows]

    async def list_properties(self, options: PropertySearchOptions, limit: int) -> List[PropertyWithRating]:
        async with self.database.session() as session:
            rows = await PropertyRepository(session).list_properties(options, limit)
            return [PropertyWithRating.model_validate(dict(row)) for row in rows]

    async def create_property(self, property_in: PropertyCreate) -> PropertyRecord:
        async with self.database.session() as session:
            created = await PropertyRepository(session).create_property(property_in.model_dump())
            return PropertyRecord.model_validate(created)

    async def close(self) -> None:
        # A pool passed in by the caller is disposed by the caller
        if self._owns_database:
            await self.database.dispose()
