import uuid

from sqlalchemy import ForeignKey, Integer, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.db_setting import Base


class BookedSeatModel(Base):
    """
    One row per reserved seat.

    The unique constraint on seat_id is what guarantees a seat can never be
    claimed by two bookings, whatever happens above the store.
    """

    __tablename__ = 'booked_seat'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    booking_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey('booking.id', ondelete='CASCADE'), nullable=False, index=True
    )
    seat_id: Mapped[int] = mapped_column(
        Integer, ForeignKey('seat.id', ondelete='CASCADE'), nullable=False, unique=True
    )
