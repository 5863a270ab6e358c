"""
Reservation repository for a guest's reservation history.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import Select, select, func, asc
from sqlalchemy.engine import RowMapping
from lightbnb.repositories.base import BaseRepository
from lightbnb.models.property import Property
from lightbnb.models.reservation import Reservation
from lightbnb.models.review import PropertyReview
from typing import List
import logging

logger = logging.getLogger(__name__)


def past_reservations_query(guest_id: int, limit: int) -> Select:
    """
    Reservations of a guest that ended before now, joined to the property and
    its average rating, earliest stay first.
    """
    property_columns = [column for column in Property.__table__.columns if column.key != "id"]

    return (
        select(
            Reservation.id,
            Reservation.property_id,
            Reservation.guest_id,
            Reservation.start_date,
            Reservation.end_date,
            *property_columns,
            func.avg(PropertyReview.rating).label("average_rating"),
        )
        .select_from(Reservation)
        .join(Property, Reservation.property_id == Property.id)
        .outerjoin(PropertyReview, PropertyReview.property_id == Property.id)
        .where(Reservation.guest_id == guest_id, Reservation.end_date < func.now())
        .group_by(Property.id, Reservation.id)
        .order_by(asc(Reservation.start_date), asc(Reservation.id))
        .limit(limit)
    )


class ReservationRepository(BaseRepository[Reservation]):
    """Repository for reservations."""

    def __init__(self, db: AsyncSession):
        super().__init__(Reservation, db)

    async def get_past_reservations(self, guest_id: int, limit: int) -> List[RowMapping]:
        """
        Get the guest's finished reservations.

        Args:
            guest_id: ID of the guest
            limit: Maximum number of rows to return

        Returns:
            Row mappings with reservation and property columns plus ``average_rating``
        """
        try:
            result = await self.db.execute(past_reservations_query(guest_id, limit))
            rows = result.mappings().all()
            logger.debug(f"Retrieved {len(rows)} past reservations for guest {guest_id}")
            return list(rows)
        except Exception as e:
            logger.error(f"Failed to get past reservations for guest {guest_id}: {e}")
            raise
