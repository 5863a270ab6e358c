"""
Property repository with the property listing filter builder.

Filters are accumulated as SQLAlchemy expressions, so every caller-supplied
value reaches the database as a bound parameter.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import Select, select, and_, func, asc
from lightbnb.repositories.base import BaseRepository
from lightbnb.models.property import Property
from lightbnb.models.review import PropertyReview
from lightbnb.schemas.property import PropertySearchOptions
from typing import List, Dict, Any
from sqlalchemy.engine import RowMapping
import logging

logger = logging.getLogger(__name__)


class PropertyQueryBuilder:
    """
    Assembles the property listing statement.

    Row predicates go to WHERE, aggregate predicates go to HAVING; each list
    is joined with AND.
    """

    def __init__(self):
        self.conditions: List = []
        self.aggregate_conditions: List = []
        self.average_rating = func.avg(PropertyReview.rating)

    def where(self, condition) -> "PropertyQueryBuilder":
        self.conditions.append(condition)
        return self

    def having(self, condition) -> "PropertyQueryBuilder":
        self.aggregate_conditions.append(condition)
        return self

    def apply_options(self, options: PropertySearchOptions) -> "PropertyQueryBuilder":
        """Add one predicate per supplied search option."""
        # Case-insensitive substring match; % and _ in the input are literal
        if options.city:
            self.where(Property.city.icontains(options.city, autoescape=True))

        if options.owner_id:
            self.where(Property.owner_id == options.owner_id)

        # Price bounds arrive in dollars and are compared in cents
        if options.minimum_cost_cents is not None:
            self.where(Property.cost_per_night >= options.minimum_cost_cents)
        if options.maximum_cost_cents is not None:
            self.where(Property.cost_per_night <= options.maximum_cost_cents)

        if options.minimum_rating:
            self.having(self.average_rating >= options.minimum_rating)

        return self

    def build(self, limit: int) -> Select:
        """Return the grouped, ordered and limited SELECT."""
        query = (
            select(*Property.__table__.columns, self.average_rating.label("average_rating"))
            .select_from(Property)
            .outerjoin(PropertyReview, PropertyReview.property_id == Property.id)
        )

        if self.conditions:
            query = query.where(and_(*self.conditions))

        query = query.group_by(Property.id)

        if self.aggregate_conditions:
            query = query.having(and_(*self.aggregate_conditions))

        return query.order_by(asc(Property.cost_per_night), asc(Property.id)).limit(limit)


class PropertyRepository(BaseRepository[Property]):
    """Repository for property listings."""

    def __init__(self, db: AsyncSession):
        super().__init__(Property, db)

    async def create_property(self, property_data: Dict[str, Any]) -> Property:
        """
        Insert a property and return it with its generated id.

        A missing owner surfaces as the driver's IntegrityError.
        """
        created_property = await self.create(property_data)
        logger.info(f"Created property: {created_property.title} (ID: {created_property.id})")
        return created_property

    async def list_properties(self, options: PropertySearchOptions, limit: int) -> List[RowMapping]:
        """
        List properties with their average rating, cheapest first.

        Args:
            options: Search filters
            limit: Maximum number of rows to return

        Returns:
            Row mappings holding the property columns and ``average_rating``
        """
        query = PropertyQueryBuilder().apply_options(options).build(limit)

        try:
            result = await self.db.execute(query)
            rows = result.mappings().all()
            logger.debug(f"Property listing returned {len(rows)} rows (limit {limit})")
            return list(rows)
        except Exception as e:
            logger.error(f"Failed to list properties: {e}")
            raise
