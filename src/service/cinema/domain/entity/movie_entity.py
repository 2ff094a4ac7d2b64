from datetime import date
from typing import Optional

import attrs


DEFAULT_MOVIE_CAPACITY = 100


@attrs.define(frozen=True)
class MovieEntity:
    id: int
    title: str
    capacity: int = DEFAULT_MOVIE_CAPACITY
    genre: Optional[str] = None
    duration_minutes: Optional[int] = None
    description: Optional[str] = None
    release_date: Optional[date] = None
    poster_url: Optional[str] = None

    def available_seats(self, booked_count: int) -> int:
        """Seats left for sale, derived from the number of booked seat rows"""
        return max(self.capacity - booked_count, 0)
