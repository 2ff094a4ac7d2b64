from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncContextManager, AsyncIterator, Callable, List, Optional
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from uuid_utils import UUID

from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.cinema.app.dto.booking_view import BookingDetail, BookingHistoryEntry
from src.service.cinema.app.interface.i_reservation_ledger_repo import IReservationLedgerRepo
from src.service.cinema.domain.entity.seat_entity import format_seat_label
from src.service.cinema.driven_adapter.model.booked_seat_model import BookedSeatModel
from src.service.cinema.driven_adapter.model.booking_model import BookingModel
from src.service.cinema.driven_adapter.model.movie_model import MovieModel
from src.service.cinema.driven_adapter.model.seat_model import SeatModel
from src.service.cinema.driven_adapter.model.user_model import UserModel


def _to_db_uuid(booking_id: UUID | uuid.UUID) -> uuid.UUID:
    # Drivers bind stdlib uuid.UUID; uuid_utils.UUID is converted through its string form
    return booking_id if isinstance(booking_id, uuid.UUID) else uuid.UUID(str(booking_id))


def _to_utils_uuid(booking_id: uuid.UUID) -> UUID:
    return UUID(str(booking_id))


class ReservationLedgerRepoImpl(IReservationLedgerRepo):
    def __init__(
        self,
        session_factory: Callable[..., AsyncContextManager[AsyncSession]] | None = None,
        *,
        session: AsyncSession | None = None,
    ):
        self.session_factory = session_factory
        self.session: AsyncSession | None = session

    @asynccontextmanager
    async def _get_session(self) -> AsyncIterator[AsyncSession]:
        if self.session is not None:
            # Session injected by UoW - use directly (no context manager needed)
            yield self.session
        elif self.session_factory is not None:
            async with self.session_factory() as session:
                yield session
        else:
            raise RuntimeError('No session or session_factory available')

    @Logger.io
    async def record_booking(
        self,
        *,
        booking_id: UUID,
        movie_id: int,
        user_id: int,
        seat_ids: List[int],
        booking_time: Optional[datetime] = None,
    ) -> UUID:
        db_booking_id = _to_db_uuid(booking_id)

        async with self._get_session() as session:
            session.add(
                BookingModel(
                    id=db_booking_id,
                    movie_id=movie_id,
                    user_id=user_id,
                    seats=len(seat_ids),
                    booking_time=booking_time or datetime.now(timezone.utc),
                )
            )
            # booked_seat rows reference the booking: insert the parent first
            await session.flush()

            session.add_all(
                [BookedSeatModel(booking_id=db_booking_id, seat_id=seat_id) for seat_id in seat_ids]
            )
            # Surface a duplicate seat claim (unique seat_id) inside the transaction
            await session.flush()

        return booking_id

    @Logger.io
    async def user_exists(self, *, user_id: int) -> bool:
        async with self._get_session() as session:
            return await session.get(UserModel, user_id) is not None

    @Logger.io
    async def get_booking_detail(self, *, booking_id: UUID) -> BookingDetail:
        db_booking_id = _to_db_uuid(booking_id)
        booking_stmt = (
            select(BookingModel, MovieModel.title)
            .join(MovieModel, MovieModel.id == BookingModel.movie_id)
            .where(BookingModel.id == db_booking_id)
        )
        seats_stmt = (
            select(SeatModel.seat_row, SeatModel.seat_number)
            .join(BookedSeatModel, BookedSeatModel.seat_id == SeatModel.id)
            .where(BookedSeatModel.booking_id == db_booking_id)
            .order_by(SeatModel.seat_row, SeatModel.seat_number)
        )

        async with self._get_session() as session:
            row = (await session.execute(booking_stmt)).one_or_none()
            if row is None:
                raise NotFoundError('Booking not found')

            db_booking, movie_title = row
            seat_rows = (await session.execute(seats_stmt)).all()

        seat_labels = [format_seat_label(seat_row, seat_number) for seat_row, seat_number in seat_rows]
        return BookingDetail(
            booking_id=_to_utils_uuid(db_booking.id),
            movie_id=db_booking.movie_id,
            movie_title=movie_title,
            user_id=db_booking.user_id,
            seat_labels=seat_labels,
            seat_count=db_booking.seats,
            booking_time=db_booking.booking_time,
        )

    @Logger.io
    async def list_user_bookings(self, *, user_id: int) -> AsyncIterator[BookingHistoryEntry]:
        """
        One row per booked seat, streamed and folded into one entry per booking.

        Rows of a booking are contiguous because the booking id is part of the sort key.
        """
        stmt = (
            select(
                BookingModel.id,
                BookingModel.booking_time,
                MovieModel.title,
                SeatModel.seat_row,
                SeatModel.seat_number,
            )
            .join(MovieModel, MovieModel.id == BookingModel.movie_id)
            .join(BookedSeatModel, BookedSeatModel.booking_id == BookingModel.id)
            .join(SeatModel, SeatModel.id == BookedSeatModel.seat_id)
            .where(BookingModel.user_id == user_id)
            .order_by(
                BookingModel.booking_time.desc(),
                BookingModel.id.desc(),
                SeatModel.seat_row,
                SeatModel.seat_number,
            )
        )

        async with self._get_session() as session:
            result = await session.stream(stmt)

            current: Optional[BookingHistoryEntry] = None
            async for booking_id, booking_time, movie_title, seat_row, seat_number in result:
                label = format_seat_label(seat_row, seat_number)
                if current is not None and current.booking_id == _to_utils_uuid(booking_id):
                    current.seat_labels.append(label)
                    continue
                if current is not None:
                    yield current
                current = BookingHistoryEntry(
                    booking_id=_to_utils_uuid(booking_id),
                    movie_title=movie_title,
                    booking_time=booking_time,
                    seat_labels=[label],
                )

            if current is not None:
                yield current
