"""
Ephemeral store that keeps every table in process memory.

Useful for demos and tests without a database. Seeds can be loaded from
fixture JSON files holding objects keyed by id (``{"1": {...}, "2": {...}}``)
or plain lists of objects.
"""

from datetime import date, datetime, time, timezone
from pathlib import Path
from statistics import fmean
from typing import Any, Dict, Iterable, List, Optional, Union
import json
import logging

from lightbnb.exceptions import ConstraintViolationError
from lightbnb.schemas import (
    PropertyCreate,
    PropertyRecord,
    PropertySearchOptions,
    PropertyWithRating,
    ReservationWithProperty,
    UserRecord,
)
from lightbnb.stores.base import Store

logger = logging.getLogger(__name__)

FIXTURE_FILES = {
    "users": "users.json",
    "properties": "properties.json",
    "reservations": "reservations.json",
    "reviews": "property_reviews.json",
}


def _as_date(value: Union[str, date]) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value[:10])


def _load_fixture(path: Path) -> List[Dict[str, Any]]:
    with path.open(encoding="utf-8") as fh:
        data = json.load(fh)

    if isinstance(data, dict):
        # Objects keyed by id; the key fills in a missing "id"
        return [{"id": int(key), **value} for key, value in data.items()]
    return list(data)


class MemoryStore(Store):
    """
    In-memory implementation of the store interface.

    Mirrors the database rules: unique email, properties need an existing
    owner, reservations and reviews need an existing property and guest.
    """

    def __init__(
        self,
        users: Iterable[Dict[str, Any]] = (),
        properties: Iterable[Dict[str, Any]] = (),
        reservations: Iterable[Dict[str, Any]] = (),
        reviews: Iterable[Dict[str, Any]] = (),
    ):
        self.users: Dict[int, UserRecord] = {}
        self.properties: Dict[int, PropertyRecord] = {}
        self.reservations: Dict[int, Dict[str, Any]] = {}
        self.reviews: Dict[int, Dict[str, Any]] = {}

        for user in users:
            self._insert_user(UserRecord.model_validate(user))
        for property_data in properties:
            self._insert_property(PropertyRecord.model_validate(property_data))
        for reservation in reservations:
            self.add_reservation(**reservation)
        for review in reviews:
            self.add_review(**review)

    @classmethod
    def from_fixtures(cls, fixtures_dir: Union[str, Path]) -> "MemoryStore":
        """
        Seed a store from the JSON files found in ``fixtures_dir``.
        Missing files leave the matching table empty.
        """
        fixtures_dir = Path(fixtures_dir)
        seeds = {}
        for table, filename in FIXTURE_FILES.items():
            path = fixtures_dir / filename
            if path.exists():
                seeds[table] = _load_fixture(path)
                logger.debug(f"Loaded {len(seeds[table])} {table} from {path}")

        store = cls(**seeds)
        logger.info(
            f"Memory store seeded with {len(store.users)} users and {len(store.properties)} properties"
        )
        return store

    @staticmethod
    def _next_id(table: Dict[int, Any]) -> int:
        return max(table, default=0) + 1

    def _insert_user(self, user: UserRecord) -> UserRecord:
        email = user.email.lower().strip()
        if any(existing.email == email for existing in self.users.values()):
            raise ConstraintViolationError(
                f"User with email {email} already exists", constraint="users_email_key"
            )
        if user.id in self.users:
            raise ConstraintViolationError(f"User id {user.id} already exists", constraint="users_pkey")
        user = user.model_copy(update={"email": email})
        self.users[user.id] = user
        return user

    def _insert_property(self, property_record: PropertyRecord) -> PropertyRecord:
        if property_record.owner_id not in self.users:
            raise ConstraintViolationError(
                f"Owner {property_record.owner_id} does not exist",
                constraint="properties_owner_id_fkey",
            )
        if property_record.id in self.properties:
            raise ConstraintViolationError(
                f"Property id {property_record.id} already exists", constraint="properties_pkey"
            )
        self.properties[property_record.id] = property_record
        return property_record

    def add_reservation(
        self,
        property_id: int,
        guest_id: int,
        start_date: Union[str, date],
        end_date: Union[str, date],
        id: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Record a reservation; there is no gateway operation for bookings."""
        if property_id not in self.properties:
            raise ConstraintViolationError(
                f"Property {property_id} does not exist", constraint="reservations_property_id_fkey"
            )
        if guest_id not in self.users:
            raise ConstraintViolationError(
                f"Guest {guest_id} does not exist", constraint="reservations_guest_id_fkey"
            )

        reservation = {
            "id": id or self._next_id(self.reservations),
            "property_id": property_id,
            "guest_id": guest_id,
            "start_date": _as_date(start_date),
            "end_date": _as_date(end_date),
        }
        if reservation["end_date"] < reservation["start_date"]:
            raise ConstraintViolationError("Reservation ends before it starts", constraint="ck_reservations_dates")

        self.reservations[reservation["id"]] = reservation
        return reservation

    def add_review(
        self,
        property_id: int,
        guest_id: int,
        rating: int,
        reservation_id: Optional[int] = None,
        message: Optional[str] = None,
        id: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Record a review of a property."""
        if property_id not in self.properties:
            raise ConstraintViolationError(
                f"Property {property_id} does not exist", constraint="property_reviews_property_id_fkey"
            )
        if guest_id not in self.users:
            raise ConstraintViolationError(
                f"Guest {guest_id} does not exist", constraint="property_reviews_guest_id_fkey"
            )
        if reservation_id is not None and reservation_id not in self.reservations:
            raise ConstraintViolationError(
                f"Reservation {reservation_id} does not exist",
                constraint="property_reviews_reservation_id_fkey",
            )
        if not 0 <= rating <= 5:
            raise ConstraintViolationError("Rating must be between 0 and 5", constraint="ck_property_reviews_rating")

        review = {
            "id": id or self._next_id(self.reviews),
            "property_id": property_id,
            "guest_id": guest_id,
            "reservation_id": reservation_id,
            "rating": rating,
            "message": message,
        }
        self.reviews[review["id"]] = review
        return review

    def average_rating(self, property_id: int) -> Optional[float]:
        ratings = [review["rating"] for review in self.reviews.values() if review["property_id"] == property_id]
        return fmean(ratings) if ratings else None

    async def get_user_by_email(self, email: str) -> Optional[UserRecord]:
        normalized_email = email.lower().strip()
        for user in self.users.values():
            if user.email == normalized_email:
                return user.model_copy()
        logger.debug(f"User with email {email} not found")
        return None

    async def get_user_by_id(self, user_id: int) -> Optional[UserRecord]:
        user = self.users.get(user_id)
        return user.model_copy() if user else None

    async def create_user(self, name: str, email: str, password: str) -> UserRecord:
        user = self._insert_user(
            UserRecord(id=self._next_id(self.users), name=name, email=email, password=password)
        )
        logger.info(f"Created user: {user.email} (ID: {user.id})")
        return user.model_copy()

    async def list_past_reservations(self, guest_id: int, limit: int) -> List[ReservationWithProperty]:
        # UTC, as CURRENT_TIMESTAMP is on SQLite
        now = datetime.now(timezone.utc)
        past = [
            reservation
            for reservation in self.reservations.values()
            if reservation["guest_id"] == guest_id
            and datetime.combine(reservation["end_date"], time.min, tzinfo=timezone.utc) < now
        ]
        past.sort(key=lambda reservation: (reservation["start_date"], reservation["id"]))

        results = []
        for reservation in past[:limit]:
            property_data = self.properties[reservation["property_id"]].model_dump(exclude={"id"})
            results.append(
                ReservationWithProperty(
                    **property_data,
                    **reservation,
                    average_rating=self.average_rating(reservation["property_id"]),
                )
            )
        return results

    async def list_properties(self, options: PropertySearchOptions, limit: int) -> List[PropertyWithRating]:
        minimum_cents = options.minimum_cost_cents
        maximum_cents = options.maximum_cost_cents
        city = options.city.lower() if options.city else None

        matches = []
        for property_record in self.properties.values():
            if city and city not in property_record.city.lower():
                continue
            if options.owner_id and property_record.owner_id != options.owner_id:
                continue
            if minimum_cents is not None and property_record.cost_per_night < minimum_cents:
                continue
            if maximum_cents is not None and property_record.cost_per_night > maximum_cents:
                continue

            average = self.average_rating(property_record.id)
            if options.minimum_rating and (average is None or average < options.minimum_rating):
                continue

            matches.append(PropertyWithRating(**property_record.model_dump(), average_rating=average))

        matches.sort(key=lambda match: (match.cost_per_night, match.id))
        logger.debug(f"Property listing returned {min(len(matches), limit)} of {len(matches)} matches")
        return matches[:limit]

    async def create_property(self, property_in: PropertyCreate) -> PropertyRecord:
        property_record = self._insert_property(
            PropertyRecord(id=self._next_id(self.properties), **property_in.model_dump())
        )
        logger.info(f"Created property: {property_record.title} (ID: {property_record.id})")
        return property_record.model_copy()
