from contextlib import asynccontextmanager
from typing import AsyncContextManager, AsyncIterator, Callable, List, Optional, Set, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.cinema.app.dto.seat_status import SeatStatus
from src.service.cinema.app.interface.i_seat_inventory_repo import ISeatInventoryRepo
from src.service.cinema.domain.entity.movie_entity import MovieEntity
from src.service.cinema.domain.entity.seat_entity import SeatEntity, format_seat_label
from src.service.cinema.driven_adapter.model.booked_seat_model import BookedSeatModel
from src.service.cinema.driven_adapter.model.movie_model import MovieModel
from src.service.cinema.driven_adapter.model.seat_model import SeatModel


class SeatInventoryRepoImpl(ISeatInventoryRepo):
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
        """
        Get session for query execution.

        If session is injected (from UoW), yield it directly without context management.
        Otherwise, use session_factory context manager.
        """
        if self.session is not None:
            yield self.session
        elif self.session_factory is not None:
            async with self.session_factory() as session:
                yield session
        else:
            raise RuntimeError('No session or session_factory available')

    @staticmethod
    def _to_movie_entity(db_movie: MovieModel) -> MovieEntity:
        return MovieEntity(
            id=db_movie.id,
            title=db_movie.title,
            capacity=db_movie.capacity,
            genre=db_movie.genre,
            duration_minutes=db_movie.duration_minutes,
            description=db_movie.description,
            release_date=db_movie.release_date,
            poster_url=db_movie.poster_url,
        )

    @staticmethod
    def _to_seat_entity(db_seat: SeatModel) -> SeatEntity:
        return SeatEntity(
            id=db_seat.id,
            movie_id=db_seat.movie_id,
            row=db_seat.seat_row,
            number=db_seat.seat_number,
        )

    @Logger.io
    async def get_movie(self, *, movie_id: int) -> Optional[MovieEntity]:
        async with self._get_session() as session:
            db_movie = await session.get(MovieModel, movie_id)
            return self._to_movie_entity(db_movie) if db_movie else None

    @Logger.io
    async def lock_movie(self, *, movie_id: int) -> Optional[MovieEntity]:
        # SQLite ignores FOR UPDATE; its writer lock already serializes bookings
        stmt = select(MovieModel).where(MovieModel.id == movie_id).with_for_update()
        async with self._get_session() as session:
            db_movie = (await session.execute(stmt)).scalar_one_or_none()
            return self._to_movie_entity(db_movie) if db_movie else None

    @Logger.io
    async def list_movies_with_booked_counts(self) -> List[Tuple[MovieEntity, int]]:
        booked_counts = (
            select(
                SeatModel.movie_id.label('movie_id'),
                func.count(BookedSeatModel.id).label('booked_count'),
            )
            .join(BookedSeatModel, BookedSeatModel.seat_id == SeatModel.id)
            .group_by(SeatModel.movie_id)
            .subquery()
        )
        stmt = (
            select(MovieModel, func.coalesce(booked_counts.c.booked_count, 0))
            .outerjoin(booked_counts, booked_counts.c.movie_id == MovieModel.id)
            .order_by(MovieModel.id)
        )

        async with self._get_session() as session:
            result = await session.execute(stmt)
            return [
                (self._to_movie_entity(db_movie), int(booked_count))
                for db_movie, booked_count in result.all()
            ]

    @Logger.io
    async def count_booked_seats(self, *, movie_id: int) -> int:
        stmt = (
            select(func.count(BookedSeatModel.id))
            .join(SeatModel, SeatModel.id == BookedSeatModel.seat_id)
            .where(SeatModel.movie_id == movie_id)
        )
        async with self._get_session() as session:
            return int((await session.execute(stmt)).scalar_one())

    @Logger.io(truncate_content=True)
    async def list_seats(self, *, movie_id: int) -> List[SeatStatus]:
        # booked_seat.seat_id is unique: the outer join yields exactly one row per seat
        stmt = (
            select(SeatModel, BookedSeatModel.id)
            .outerjoin(BookedSeatModel, BookedSeatModel.seat_id == SeatModel.id)
            .where(SeatModel.movie_id == movie_id)
            .order_by(SeatModel.seat_row, SeatModel.seat_number)
        )

        async with self._get_session() as session:
            if await session.get(MovieModel, movie_id) is None:
                raise NotFoundError('Movie not found')

            result = await session.execute(stmt)
            return [
                SeatStatus(
                    seat_id=db_seat.id,
                    row=db_seat.seat_row,
                    number=db_seat.seat_number,
                    label=format_seat_label(db_seat.seat_row, db_seat.seat_number),
                    is_booked=booked_seat_id is not None,
                )
                for db_seat, booked_seat_id in result.all()
            ]

    @Logger.io
    async def check_availability(self, *, seat_ids: List[int]) -> Set[int]:
        if not seat_ids:
            return set()

        stmt = (
            select(SeatModel.id)
            .outerjoin(BookedSeatModel, BookedSeatModel.seat_id == SeatModel.id)
            .where(SeatModel.id.in_(seat_ids), BookedSeatModel.id.is_(None))
        )
        async with self._get_session() as session:
            result = await session.execute(stmt)
            return set(result.scalars().all())

    @Logger.io
    async def lock_seats(self, *, movie_id: int, seat_ids: List[int]) -> List[SeatEntity]:
        """
        SELECT ... FOR UPDATE OF seat, ordered by id.

        Every booking locks seats in the same order, so two overlapping
        bookings queue on the first shared seat instead of deadlocking.
        SQLite has no row locks and ignores the clause; its single writer
        lock serializes the transactions instead.
        """
        if not seat_ids:
            return []

        stmt = (
            select(SeatModel)
            .where(SeatModel.id.in_(seat_ids), SeatModel.movie_id == movie_id)
            .order_by(SeatModel.id)
            .with_for_update(of=SeatModel)
        )
        async with self._get_session() as session:
            result = await session.execute(stmt)
            return [self._to_seat_entity(db_seat) for db_seat in result.scalars().all()]
