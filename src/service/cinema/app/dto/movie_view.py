"""Movie read model DTOs."""

from typing import List

import attrs

from src.service.cinema.app.dto.seat_status import SeatStatus
from src.service.cinema.domain.entity.movie_entity import MovieEntity


@attrs.define(frozen=True)
class MovieSummary:
    id: int
    title: str
    genre: str | None
    duration_minutes: int | None
    capacity: int
    available_seats: int


@attrs.define(frozen=True)
class MovieSeatMap:
    """Movie details plus the full seat grid, ordered by row then number."""

    movie: MovieEntity
    seats: List[SeatStatus]
    booked_count: int
    available_seats: int
