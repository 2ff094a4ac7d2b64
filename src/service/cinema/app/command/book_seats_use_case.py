import asyncio
import time
from typing import Callable, List, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace
from uuid_utils import UUID

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.database.store_errors import (
    is_foreign_key_violation,
    is_transient_store_error,
    is_unique_violation,
)
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import (
    NotFoundError,
    SeatsUnavailableError,
    TransientStoreError,
    ValidationError,
)
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.booking_metrics import BookingMetrics, BookingResult
from src.service.cinema.domain.entity.booking_entity import Booking


def classify_store_error(error: Exception, *, seat_ids: List[int]) -> Exception:
    """
    Map a raw store error raised inside the booking transaction to a domain error.

    Returns the error unchanged when it is not a seat conflict, a missing
    reference or a transient failure.
    """
    if is_unique_violation(error):
        # The store only reports the violated constraint, not which seat lost
        return SeatsUnavailableError(seat_ids)
    if is_foreign_key_violation(error):
        return NotFoundError('Referenced user or seat not found')
    if is_transient_store_error(error):
        return TransientStoreError()
    return error


class BookSeatsUseCase:
    """
    Book seats - availability check, reservation and ledger write as one atomic unit

    Flow (per attempt, each attempt in a fresh unit of work):
    1. Lock the movie row and check the user exists
    2. Lock the requested seats of the movie (SELECT ... FOR UPDATE, id order)
    3. Check which locked seats are still unbooked and that the movie has room
    4. Record the booking and its booked_seat rows
    5. Commit, or roll everything back on any failure

    Transient store failures (lock timeout, deadlock, dropped connection)
    restart the attempt up to max_attempts times.
    """

    def __init__(
        self,
        *,
        uow_factory: Callable[[], AbstractUnitOfWork],
        metrics: BookingMetrics,
        max_attempts: int = settings.BOOKING_MAX_ATTEMPTS,
        retry_delay_seconds: float = settings.BOOKING_RETRY_DELAY_SECONDS,
        max_seats_per_booking: int = settings.MAX_SEATS_PER_BOOKING,
    ) -> None:
        self.uow_factory = uow_factory
        self.metrics = metrics
        self.max_attempts = max(max_attempts, 1)
        self.retry_delay_seconds = retry_delay_seconds
        self.max_seats_per_booking = max_seats_per_booking
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: Callable[[], AbstractUnitOfWork] = Depends(
            Provide[Container.unit_of_work.provider]
        ),
        metrics: BookingMetrics = Depends(Provide[Container.booking_metrics]),
        config=Depends(Provide[Container.config_service]),
    ) -> Self:
        return cls(
            uow_factory=uow_factory,
            metrics=metrics,
            max_attempts=config.BOOKING_MAX_ATTEMPTS,
            retry_delay_seconds=config.BOOKING_RETRY_DELAY_SECONDS,
            max_seats_per_booking=config.MAX_SEATS_PER_BOOKING,
        )

    @Logger.io
    async def book_seats(self, *, movie_id: int, user_id: int, seat_ids: List[int]) -> UUID:
        """
        Returns:
            The booking id (UUID7), which is also the confirmation reference

        Raises:
            ValidationError: malformed request, rejected before any store access
            NotFoundError: movie or user missing, or seat ids that are not seats of the movie
            SeatsUnavailableError: a requested seat is already booked, or the movie is full
            TransientStoreError: the store stayed busy for every attempt
        """
        start_time = time.perf_counter()

        try:
            booking = Booking.create(
                movie_id=movie_id,
                user_id=user_id,
                seat_ids=seat_ids,
                max_seats=self.max_seats_per_booking,
            )
        except ValidationError:
            self._record(movie_id, BookingResult.INVALID, start_time)
            raise

        with Logger.booking_context(booking.id):
            try:
                await self._book_with_retry(booking)
            except SeatsUnavailableError:
                self._record(movie_id, BookingResult.UNAVAILABLE, start_time)
                raise
            except NotFoundError:
                self._record(movie_id, BookingResult.NOT_FOUND, start_time)
                raise
            except TransientStoreError:
                self._record(movie_id, BookingResult.TRANSIENT, start_time)
                raise

            self._record(
                movie_id, BookingResult.SUCCESS, start_time, seat_count=booking.seat_count
            )
            Logger.base.info(
                f'🎟️ [BOOK-SEATS] Booking confirmed: '
                f'user {user_id}, movie {movie_id}, seats {list(booking.seat_ids)}'
            )
        return booking.id

    async def _book_with_retry(self, booking: Booking) -> None:
        for attempt in range(1, self.max_attempts + 1):
            try:
                await self._attempt(booking, attempt=attempt)
                return
            except TransientStoreError:
                if attempt >= self.max_attempts:
                    Logger.base.error(f'❌ [BOOK-SEATS] Store still busy after {attempt} attempts')
                    raise
                self.metrics.record_retry(movie_id=booking.movie_id)
                Logger.base.warning(
                    f'🔄 [BOOK-SEATS] Transient store failure on attempt '
                    f'{attempt}/{self.max_attempts}, retrying...'
                )
                await asyncio.sleep(self.retry_delay_seconds * attempt)

    async def _attempt(self, booking: Booking, *, attempt: int) -> None:
        seat_ids = list(booking.seat_ids)

        with self.tracer.start_as_current_span(
            'use_case.book_seats',
            attributes={
                'booking.id': str(booking.id),
                'movie.id': booking.movie_id,
                'booking.seat_count': booking.seat_count,
                'booking.attempt': attempt,
            },
        ):
            try:
                async with self.uow_factory() as uow:
                    movie = await uow.seat_inventory_repo.lock_movie(movie_id=booking.movie_id)
                    if movie is None:
                        raise NotFoundError('Movie not found')
                    if not await uow.reservation_ledger_repo.user_exists(user_id=booking.user_id):
                        raise NotFoundError('User not found')

                    locked_seats = await uow.seat_inventory_repo.lock_seats(
                        movie_id=booking.movie_id, seat_ids=seat_ids
                    )
                    unknown_ids = sorted(set(seat_ids) - {seat.id for seat in locked_seats})
                    if unknown_ids:
                        raise NotFoundError(
                            f'Seats not found for movie {booking.movie_id}: {unknown_ids}'
                        )

                    # Separate statement after the locks are granted: sees the previous holder's commit
                    available_ids = await uow.seat_inventory_repo.check_availability(
                        seat_ids=seat_ids
                    )
                    taken_seats = [seat for seat in locked_seats if seat.id not in available_ids]
                    if taken_seats:
                        raise SeatsUnavailableError(
                            [seat.id for seat in taken_seats],
                            [seat.label for seat in taken_seats],
                        )

                    booked_count = await uow.seat_inventory_repo.count_booked_seats(
                        movie_id=booking.movie_id
                    )
                    seats_left = movie.available_seats(booked_count)
                    if booking.seat_count > seats_left:
                        raise SeatsUnavailableError(
                            seat_ids,
                            [seat.label for seat in locked_seats],
                            message=f'Only {seats_left} seats left for this movie',
                        )

                    await uow.reservation_ledger_repo.record_booking(
                        booking_id=booking.id,
                        movie_id=booking.movie_id,
                        user_id=booking.user_id,
                        seat_ids=seat_ids,
                        booking_time=booking.booking_time,
                    )
                    await uow.commit()
            except (NotFoundError, SeatsUnavailableError):
                raise
            except Exception as e:
                classified = classify_store_error(e, seat_ids=seat_ids)
                if classified is e:
                    raise
                raise classified from e

    def _record(self, movie_id: int, result: str, start_time: float, *, seat_count: int = 0) -> None:
        self.metrics.record_booking(
            movie_id=movie_id,
            result=result,
            duration=time.perf_counter() - start_time,
            seat_count=seat_count,
        )
