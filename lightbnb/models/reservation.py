"""
Reservation model linking a guest to a property for a date range.
"""

from sqlalchemy import Date, Integer, ForeignKey, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from lightbnb.database import Base
from datetime import date
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lightbnb.models.user import User
    from lightbnb.models.property import Property


class Reservation(Base):
    """A booking; considered past once end_date precedes the current time."""

    __tablename__ = "reservations"
    __table_args__ = (
        CheckConstraint("end_date >= start_date", name="ck_reservations_dates"),
    )

    start_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)

    property_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    guest_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    property_rel: Mapped["Property"] = relationship(
        "Property",
        back_populates="reservations",
        lazy="noload"
    )

    guest: Mapped["User"] = relationship(
        "User",
        back_populates="reservations",
        lazy="noload"
    )

    def __repr__(self) -> str:
        return f"<Reservation(id={self.id}, property_id={self.property_id}, {self.start_date}..{self.end_date})>"
