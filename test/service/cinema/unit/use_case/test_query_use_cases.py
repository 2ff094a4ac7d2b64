"""
Unit tests for the read services

Each use case is exercised with mocked repositories; none of them mutates anything.
"""

from datetime import datetime, timezone
from typing import AsyncIterator
from unittest.mock import AsyncMock, MagicMock

import pytest
from uuid_utils import UUID

from src.platform.exception.exceptions import NotFoundError
from src.service.cinema.app.dto import BookingDetail, BookingHistoryEntry, SeatStatus
from src.service.cinema.app.query.get_booking_confirmation_use_case import (
    GetBookingConfirmationUseCase,
)
from src.service.cinema.app.query.get_movie_seat_map_use_case import GetMovieSeatMapUseCase
from src.service.cinema.app.query.list_movies_use_case import ListMoviesUseCase
from src.service.cinema.app.query.list_user_bookings_use_case import ListUserBookingsUseCase
from src.service.cinema.domain.entity.movie_entity import MovieEntity


BOOKING_ID = UUID('01936d8f-5e73-7c4e-a9c5-123456789abc')
BOOKED_AT = datetime(2026, 10, 19, 18, 30, tzinfo=timezone.utc)


@pytest.fixture
def mock_seat_inventory_repo() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def mock_reservation_ledger_repo() -> MagicMock:
    return MagicMock()


@pytest.fixture
def booking_detail() -> BookingDetail:
    return BookingDetail(
        booking_id=BOOKING_ID,
        movie_id=1,
        movie_title='Inception',
        user_id=7,
        seat_labels=['A1', 'A2'],
        seat_count=2,
        booking_time=BOOKED_AT,
    )


@pytest.mark.unit
class TestListMoviesUseCase:
    @pytest.mark.asyncio
    async def test_list_movies__available_seats_derived_from_booked_count(
        self, mock_seat_inventory_repo: AsyncMock
    ) -> None:
        # Arrange
        mock_seat_inventory_repo.list_movies_with_booked_counts.return_value = [
            (MovieEntity(id=1, title='Inception', capacity=100, genre='Sci-Fi'), 3),
            (MovieEntity(id=2, title='Spirited Away', capacity=2), 2),
        ]
        use_case = ListMoviesUseCase(seat_inventory_repo=mock_seat_inventory_repo)

        # Act
        movies = await use_case.list_movies()

        # Assert
        assert [(m.id, m.available_seats) for m in movies] == [(1, 97), (2, 0)]
        assert movies[0].genre == 'Sci-Fi'


@pytest.mark.unit
class TestGetMovieSeatMapUseCase:
    @pytest.mark.asyncio
    async def test_get_seat_map__counts_booked_seats(
        self, mock_seat_inventory_repo: AsyncMock
    ) -> None:
        # Arrange
        mock_seat_inventory_repo.get_movie.return_value = MovieEntity(
            id=1, title='Inception', capacity=100
        )
        mock_seat_inventory_repo.list_seats.return_value = [
            SeatStatus(seat_id=11, row='A', number=1, label='A1', is_booked=True),
            SeatStatus(seat_id=12, row='A', number=2, label='A2', is_booked=False),
        ]
        use_case = GetMovieSeatMapUseCase(seat_inventory_repo=mock_seat_inventory_repo)

        # Act
        seat_map = await use_case.get_seat_map(movie_id=1)

        # Assert
        assert seat_map.movie.title == 'Inception'
        assert [seat.label for seat in seat_map.seats] == ['A1', 'A2']
        assert seat_map.booked_count == 1
        assert seat_map.available_seats == 99

    @pytest.mark.asyncio
    async def test_get_seat_map__movie_not_found(self, mock_seat_inventory_repo: AsyncMock) -> None:
        mock_seat_inventory_repo.get_movie.return_value = None
        use_case = GetMovieSeatMapUseCase(seat_inventory_repo=mock_seat_inventory_repo)

        with pytest.raises(NotFoundError):
            await use_case.get_seat_map(movie_id=404)

        mock_seat_inventory_repo.list_seats.assert_not_awaited()


@pytest.mark.unit
class TestGetBookingConfirmationUseCase:
    @pytest.mark.asyncio
    async def test_get_confirmation__owner(
        self, mock_reservation_ledger_repo: MagicMock, booking_detail: BookingDetail
    ) -> None:
        mock_reservation_ledger_repo.get_booking_detail = AsyncMock(return_value=booking_detail)
        use_case = GetBookingConfirmationUseCase(
            reservation_ledger_repo=mock_reservation_ledger_repo
        )

        detail = await use_case.get_confirmation(booking_id=BOOKING_ID, user_id=7)

        assert detail == booking_detail
        mock_reservation_ledger_repo.get_booking_detail.assert_awaited_once_with(
            booking_id=BOOKING_ID
        )

    @pytest.mark.asyncio
    async def test_get_confirmation__without_user_check(
        self, mock_reservation_ledger_repo: MagicMock, booking_detail: BookingDetail
    ) -> None:
        mock_reservation_ledger_repo.get_booking_detail = AsyncMock(return_value=booking_detail)
        use_case = GetBookingConfirmationUseCase(
            reservation_ledger_repo=mock_reservation_ledger_repo
        )

        assert await use_case.get_confirmation(booking_id=BOOKING_ID) == booking_detail

    @pytest.mark.asyncio
    async def test_get_confirmation__other_user_sees_not_found(
        self, mock_reservation_ledger_repo: MagicMock, booking_detail: BookingDetail
    ) -> None:
        mock_reservation_ledger_repo.get_booking_detail = AsyncMock(return_value=booking_detail)
        use_case = GetBookingConfirmationUseCase(
            reservation_ledger_repo=mock_reservation_ledger_repo
        )

        with pytest.raises(NotFoundError) as exc_info:
            await use_case.get_confirmation(booking_id=BOOKING_ID, user_id=8)

        assert str(exc_info.value) == 'Booking not found'


@pytest.mark.unit
class TestListUserBookingsUseCase:
    @pytest.mark.asyncio
    async def test_list_user_bookings__collects_streamed_entries(
        self, mock_reservation_ledger_repo: MagicMock
    ) -> None:
        # Arrange
        entries = [
            BookingHistoryEntry(
                booking_id=BOOKING_ID,
                movie_title='Inception',
                booking_time=BOOKED_AT,
                seat_labels=['A1'],
            )
        ]

        async def _stream(*, user_id: int) -> AsyncIterator[BookingHistoryEntry]:
            for entry in entries:
                yield entry

        mock_reservation_ledger_repo.list_user_bookings = MagicMock(side_effect=_stream)
        use_case = ListUserBookingsUseCase(reservation_ledger_repo=mock_reservation_ledger_repo)

        # Act
        result = await use_case.list_user_bookings(user_id=7)

        # Assert
        assert result == entries
        mock_reservation_ledger_repo.list_user_bookings.assert_called_once_with(user_id=7)
