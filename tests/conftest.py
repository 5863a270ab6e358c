"""
Test configuration and fixtures for the LightBnB data-access layer.
Provides database and store fixtures, test data factories and seeding helpers.
"""

import pytest
import os
import uuid
from datetime import date, timedelta
from typing import AsyncGenerator, Optional

from lightbnb.config import Settings
from lightbnb.database import Database
from lightbnb.models.reservation import Reservation
from lightbnb.models.review import PropertyReview
from lightbnb.schemas import PropertyRecord, UserRecord
from lightbnb.services.gateway import QueryGateway
from lightbnb.stores.base import Store
from lightbnb.stores.database import DatabaseStore
from lightbnb.stores.memory import MemoryStore


# Set TEST_DATABASE_URL to run the durable store tests against PostgreSQL
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL")

FIXTURES_DIR = os.path.join(os.path.dirname(__file__), "fixtures")

TODAY = date.today()


@pytest.fixture
def settings() -> Settings:
    """Settings for tests: cheap password hashing, default page size of 10."""
    return Settings(
        environment="testing",
        password_hash_rounds=4,
        default_page_size=10,
        _env_file=None,
    )


@pytest.fixture
async def database(tmp_path) -> AsyncGenerator[Database, None]:
    """Create a fresh database schema for each test."""
    url = TEST_DATABASE_URL or f"sqlite+aiosqlite:///{tmp_path / 'lightbnb_test.db'}"
    db = Database(url)
    await db.create_tables()
    try:
        yield db
    finally:
        if TEST_DATABASE_URL:
            await db.drop_tables()
        await db.dispose()


@pytest.fixture(params=["database", "memory"])
async def store(request, database: Database) -> AsyncGenerator[Store, None]:
    """Run the test once against each storage backend."""
    if request.param == "database":
        backend = DatabaseStore(database)
    else:
        backend = MemoryStore()
    yield backend
    await backend.close()


@pytest.fixture
def gateway(store: Store, settings: Settings) -> QueryGateway:
    """Create a gateway over the parametrized store."""
    return QueryGateway(store, settings)


# Test data factories
class UserFactory:
    """Factory for creating test users."""

    @staticmethod
    def create_user_data(
        email: Optional[str] = None,
        password: str = "testpassword123",
        name: str = "Test User",
    ) -> dict:
        """Create user data dictionary."""
        return {
            "name": name,
            "email": email or f"test{uuid.uuid4().hex[:8]}@example.com",
            "password": password,
        }

    @staticmethod
    async def create_user(gateway: QueryGateway, **kwargs) -> UserRecord:
        """Create a test user through the gateway."""
        return await gateway.create_user(UserFactory.create_user_data(**kwargs))


class PropertyFactory:
    """Factory for creating test properties."""

    @staticmethod
    def create_property_data(
        owner_id: int,
        title: str = "Test Property",
        cost_per_night: int = 10000,
        city: str = "Vancouver",
        number_of_bedrooms: int = 2,
    ) -> dict:
        """Create property data dictionary."""
        return {
            "owner_id": owner_id,
            "title": title,
            "description": "A beautiful test property",
            "thumbnail_photo_url": "https://images.example.com/thumb.jpg",
            "cover_photo_url": "https://images.example.com/cover.jpg",
            "cost_per_night": cost_per_night,
            "street": "536 Namsub Highway",
            "city": city,
            "province": "British Columbia",
            "post_code": "V6B 1A1",
            "country": "Canada",
            "parking_spaces": 1,
            "number_of_bathrooms": 1,
            "number_of_bedrooms": number_of_bedrooms,
        }

    @staticmethod
    async def create_property(gateway: QueryGateway, owner_id: int, **kwargs) -> PropertyRecord:
        """Create a test property through the gateway."""
        return await gateway.create_property(PropertyFactory.create_property_data(owner_id, **kwargs))


# Seeding helpers for tables the gateway does not write
async def add_reservation(
    store: Store,
    property_id: int,
    guest_id: int,
    start_date: date,
    end_date: date,
) -> int:
    """Insert a reservation into either backend and return its id."""
    if isinstance(store, MemoryStore):
        return store.add_reservation(property_id, guest_id, start_date, end_date)["id"]

    async with store.database.session() as session:
        reservation = Reservation(
            property_id=property_id,
            guest_id=guest_id,
            start_date=start_date,
            end_date=end_date,
        )
        session.add(reservation)
        await session.commit()
        return reservation.id


async def add_review(store: Store, property_id: int, guest_id: int, rating: int) -> int:
    """Insert a review into either backend and return its id."""
    if isinstance(store, MemoryStore):
        return store.add_review(property_id, guest_id, rating)["id"]

    async with store.database.session() as session:
        review = PropertyReview(property_id=property_id, guest_id=guest_id, rating=rating)
        session.add(review)
        await session.commit()
        return review.id


def days_from_today(days: int) -> date:
    return TODAY + timedelta(days=days)


# Common test fixtures
@pytest.fixture
async def test_owner(gateway: QueryGateway) -> UserRecord:
    """Create a property owner."""
    return await UserFactory.create_user(gateway, email="owner@example.com", name="Olive Owner")


@pytest.fixture
async def test_guest(gateway: QueryGateway) -> UserRecord:
    """Create a guest."""
    return await UserFactory.create_user(gateway, email="guest@example.com", name="Gus Guest")


@pytest.fixture
async def test_listings(gateway: QueryGateway, store: Store, test_owner: UserRecord, test_guest: UserRecord) -> dict:
    """
    Five properties with known prices and ratings:

    ======================  ====================  ======  ================
    title                   city                  cents   ratings
    ======================  ====================  ======  ================
    Harbour Loft            Vancouver             25000   5, 4 (avg 4.5)
    Budget Room             North Vancouver        5000   2 (avg 2.0)
    Mid Range Condo         Toronto               15000   4, 3 (avg 3.5)
    Lake House              Kelowna               20000   none
    Penthouse               vancouver island      12000   5 (avg 5.0)
    ======================  ====================  ======  ================
    """
    rows = [
        ("Harbour Loft", "Vancouver", 25000, [5, 4]),
        ("Budget Room", "North Vancouver", 5000, [2]),
        ("Mid Range Condo", "Toronto", 15000, [4, 3]),
        ("Lake House", "Kelowna", 20000, []),
        ("Penthouse", "vancouver island", 12000, [5]),
    ]

    listings = {}
    for title, city, cents, ratings in rows:
        created = await PropertyFactory.create_property(
            gateway, test_owner.id, title=title, city=city, cost_per_night=cents
        )
        for rating in ratings:
            await add_review(store, created.id, test_guest.id, rating)
        listings[title] = created
    return listings


# Utility functions for tests
def assert_user_equal(user1: UserRecord, user2: UserRecord):
    """Assert that two users are equal."""
    assert user1.id == user2.id
    assert user1.name == user2.name
    assert user1.email == user2.email
    assert user1.password == user2.password
