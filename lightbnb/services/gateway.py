"""
Query gateway: the façade the web layer calls for users, reservations and
properties.

The gateway validates input, hashes passwords and delegates to an injected
store. It holds no connections of its own; the store borrows one per call.
Lookups that find nothing return None or an empty list. Database errors
(uniqueness, foreign keys, connectivity) propagate unchanged.
"""

from typing import Any, List, Mapping, Optional, Union
import logging

from lightbnb.config import Settings, get_settings
from lightbnb.models.user import User
from lightbnb.schemas import (
    PropertyCreate,
    PropertyRecord,
    PropertySearchOptions,
    PropertyWithRating,
    ReservationWithProperty,
    UserCreate,
    UserRecord,
)
from lightbnb.stores.base import Store

logger = logging.getLogger(__name__)


class QueryGateway:
    """
    Stateless façade over a ``Store``.

    Every operation is a single statement against the store; there are no
    retries and nothing to compensate on failure.
    """

    def __init__(self, store: Store, settings: Optional[Settings] = None):
        self.store = store
        self.settings = settings or get_settings()

    def _resolve_limit(self, limit: Optional[int]) -> int:
        if limit is None:
            return self.settings.default_page_size
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
            raise ValueError(f"Limit must be a positive integer, got {limit!r}")
        return limit

    # Users

    async def get_user_by_email(self, email: str) -> Optional[UserRecord]:
        """
        Get a single user given their email.

        Args:
            email: Email address, matched case-insensitively

        Returns:
            The user, or None when no user has that email
        """
        return await self.store.get_user_by_email(email)

    async def get_user_by_id(self, user_id: int) -> Optional[UserRecord]:
        """
        Get a single user given their id.

        Returns:
            The user, or None when the id is unknown
        """
        return await self.store.get_user_by_id(user_id)

    async def create_user(self, user: Union[UserCreate, Mapping[str, Any]]) -> UserRecord:
        """
        Add a new user.

        Args:
            user: ``name``, ``email`` and ``password`` (plain or a bcrypt hash)

        Returns:
            The stored user including its generated id

        Raises:
            pydantic.ValidationError: If the input is invalid
            Exception: The store's native error on a duplicate email
        """
        user_in = user if isinstance(user, UserCreate) else UserCreate.model_validate(dict(user))
        hashed_password = User.hash_password(user_in.password, rounds=self.settings.password_hash_rounds)

        created = await self.store.create_user(user_in.name, user_in.email, hashed_password)
        logger.info(f"Registered user {created.id}")
        return created

    async def authenticate_user(self, email: str, password: str) -> Optional[UserRecord]:
        """
        Check a login attempt.

        Returns:
            The user when the password matches, None otherwise
        """
        user = await self.store.get_user_by_email(email)
        if not user:
            logger.debug(f"Login failed: unknown email {email}")
            return None
        if not User.check_password(password, user.password):
            logger.debug(f"Login failed: wrong password for user {user.id}")
            return None
        return user

    # Reservations

    async def list_past_reservations(self, guest_id: int, limit: Optional[int] = None) -> List[ReservationWithProperty]:
        """
        Get a guest's finished reservations, earliest first.

        Args:
            guest_id: ID of the guest
            limit: Maximum number of reservations (defaults to the page size)

        Returns:
            Reservations whose end date is before now, with property details
            and the property's average rating
        """
        limit = self._resolve_limit(limit)
        reservations = await self.store.list_past_reservations(guest_id, limit)
        logger.debug(f"Guest {guest_id} has {len(reservations)} past reservations (limit {limit})")
        return reservations

    # Properties

    async def list_properties(
        self,
        options: Union[PropertySearchOptions, Mapping[str, Any], None] = None,
        limit: Optional[int] = None,
    ) -> List[PropertyWithRating]:
        """
        Get properties matching the search options, cheapest first.

        Args:
            options: Filters (city, owner_id, minimum_rating and price bounds
                in dollars); any may be omitted
            limit: Maximum number of properties (defaults to the page size)

        Returns:
            Matching properties with their average rating; empty when none match
        """
        if options is None:
            options = PropertySearchOptions()
        elif not isinstance(options, PropertySearchOptions):
            options = PropertySearchOptions.model_validate(dict(options))

        limit = self._resolve_limit(limit)
        properties = await self.store.list_properties(options, limit)
        logger.debug(
            f"Property listing with {options.model_dump(exclude_none=True)} returned {len(properties)} rows"
        )
        return properties

    async def create_property(self, property_data: Union[PropertyCreate, Mapping[str, Any]]) -> PropertyRecord:
        """
        Add a property listing. ``cost_per_night`` is in cents.

        Returns:
            The stored property including its generated id

        Raises:
            pydantic.ValidationError: If the input is invalid
            Exception: The store's native error when the owner does not exist
        """
        property_in = (
            property_data
            if isinstance(property_data, PropertyCreate)
            else PropertyCreate.model_validate(dict(property_data))
        )
        created = await self.store.create_property(property_in)
        logger.info(f"Listed property {created.id} for owner {created.owner_id}")
        return created
