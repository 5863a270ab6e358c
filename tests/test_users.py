"""
Tests for the user operations of the query gateway.
Run against both the database and the in-memory store.
"""

import asyncio
import pytest
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError

from lightbnb.exceptions import ConstraintViolationError
from lightbnb.models.user import User
from lightbnb.services.gateway import QueryGateway
from tests.conftest import UserFactory, assert_user_equal


class TestUserLookup:
    """Test user lookup by email and id."""

    @pytest.mark.asyncio
    async def test_unknown_email_returns_none(self, gateway: QueryGateway):
        """Unknown emails are not an error."""
        assert await gateway.get_user_by_email("nobody@example.com") is None

    @pytest.mark.asyncio
    async def test_unknown_email_with_other_users_present(self, gateway: QueryGateway):
        await UserFactory.create_user(gateway, email="somebody@example.com")

        assert await gateway.get_user_by_email("nobody@example.com") is None

    @pytest.mark.asyncio
    async def test_unknown_id_returns_none(self, gateway: QueryGateway):
        assert await gateway.get_user_by_id(999999) is None

    @pytest.mark.asyncio
    async def test_get_by_email(self, gateway: QueryGateway):
        created = await UserFactory.create_user(gateway, email="unique@example.com")

        retrieved = await gateway.get_user_by_email("unique@example.com")

        assert retrieved is not None
        assert_user_equal(retrieved, created)

    @pytest.mark.asyncio
    async def test_get_by_email_is_case_insensitive(self, gateway: QueryGateway):
        created = await UserFactory.create_user(gateway, email="Mixed.Case@Example.com")

        retrieved = await gateway.get_user_by_email("  MIXED.case@example.COM ")

        assert retrieved is not None
        assert retrieved.id == created.id


class TestCreateUser:
    """Test user creation."""

    @pytest.mark.asyncio
    async def test_create_then_get_by_id(self, gateway: QueryGateway):
        """A created user reads back with the input fields plus a generated id."""
        user_data = UserFactory.create_user_data(email="devin@example.com", name="Devin Sanders")

        created = await gateway.create_user(user_data)
        retrieved = await gateway.get_user_by_id(created.id)

        assert created.id is not None
        assert retrieved is not None
        assert_user_equal(retrieved, created)
        assert retrieved.name == "Devin Sanders"
        assert retrieved.email == "devin@example.com"
        assert User.check_password(user_data["password"], retrieved.password)

    @pytest.mark.asyncio
    async def test_password_is_hashed_at_rest(self, gateway: QueryGateway):
        created = await UserFactory.create_user(gateway, password="plainpassword")

        assert created.password != "plainpassword"
        assert created.password.startswith("$2b$")

    @pytest.mark.asyncio
    async def test_existing_hash_is_stored_as_given(self, gateway: QueryGateway):
        hashed = User.hash_password("password", rounds=4)

        created = await UserFactory.create_user(gateway, password=hashed)

        assert created.password == hashed

    @pytest.mark.asyncio
    async def test_ids_are_distinct(self, gateway: QueryGateway):
        first = await UserFactory.create_user(gateway)
        second = await UserFactory.create_user(gateway)

        assert first.id != second.id

    @pytest.mark.asyncio
    async def test_duplicate_email_is_rejected(self, gateway: QueryGateway):
        """Uniqueness violations surface as the backend's own error."""
        await UserFactory.create_user(gateway, email="taken@example.com")

        with pytest.raises((IntegrityError, ConstraintViolationError)):
            await UserFactory.create_user(gateway, email="TAKEN@example.com")

    @pytest.mark.asyncio
    async def test_store_stays_usable_after_failure(self, gateway: QueryGateway):
        await UserFactory.create_user(gateway, email="taken@example.com")
        with pytest.raises((IntegrityError, ConstraintViolationError)):
            await UserFactory.create_user(gateway, email="taken@example.com")

        created = await UserFactory.create_user(gateway, email="free@example.com")
        assert await gateway.get_user_by_id(created.id) is not None

    @pytest.mark.asyncio
    async def test_changing_returned_user_does_not_change_stored_user(self, gateway: QueryGateway):
        """Records handed to callers are detached from the store."""
        created = await UserFactory.create_user(gateway, email="kept@example.com", name="Kept Name")
        created.email = "changed@example.com"

        found = await gateway.get_user_by_email("kept@example.com")
        assert found is not None
        assert found.name == "Kept Name"
        assert await gateway.get_user_by_email("changed@example.com") is None

        found.name = "Other Name"
        assert (await gateway.get_user_by_id(created.id)).name == "Kept Name"

    @pytest.mark.asyncio
    async def test_invalid_email_is_rejected(self, gateway: QueryGateway):
        with pytest.raises(ValidationError):
            await gateway.create_user({"name": "Bad Email", "email": "not-an-email", "password": "secret"})

    @pytest.mark.asyncio
    async def test_blank_name_is_rejected(self, gateway: QueryGateway):
        with pytest.raises(ValidationError):
            await gateway.create_user({"name": "   ", "email": "blank@example.com", "password": "secret"})


class TestAuthenticateUser:
    """Test login checks."""

    @pytest.mark.asyncio
    async def test_correct_password(self, gateway: QueryGateway):
        created = await UserFactory.create_user(gateway, email="login@example.com", password="correct-horse")

        user = await gateway.authenticate_user("login@example.com", "correct-horse")

        assert user is not None
        assert user.id == created.id

    @pytest.mark.asyncio
    async def test_wrong_password(self, gateway: QueryGateway):
        await UserFactory.create_user(gateway, email="login@example.com", password="correct-horse")

        assert await gateway.authenticate_user("login@example.com", "battery-staple") is None

    @pytest.mark.asyncio
    async def test_unknown_email(self, gateway: QueryGateway):
        assert await gateway.authenticate_user("ghost@example.com", "anything") is None


class TestConcurrentLookups:
    """Parallel calls each borrow their own connection."""

    @pytest.mark.asyncio
    async def test_parallel_lookups_return_their_own_user(self, gateway: QueryGateway):
        users = [
            await UserFactory.create_user(gateway, email=f"parallel{i}@example.com", name=f"User {i}")
            for i in range(8)
        ]

        results = await asyncio.gather(
            *(gateway.get_user_by_email(user.email) for user in users)
        )

        for user, result in zip(users, results):
            assert result is not None
            assert result.id == user.id
            assert result.email == user.email
