from abc import ABC, abstractmethod
from typing import List, Optional, Set, Tuple

from src.service.cinema.app.dto.seat_status import SeatStatus
from src.service.cinema.domain.entity.movie_entity import MovieEntity
from src.service.cinema.domain.entity.seat_entity import SeatEntity


class ISeatInventoryRepo(ABC):
    """Bookable seats per movie and their derived reservation state"""

    @abstractmethod
    async def get_movie(self, *, movie_id: int) -> Optional[MovieEntity]:
        pass

    @abstractmethod
    async def lock_movie(self, *, movie_id: int) -> Optional[MovieEntity]:
        """
        Row-lock the movie for the rest of the unit of work.

        Bookings of the same movie queue here, so the booked count read after
        it stays valid until commit.
        """
        pass

    @abstractmethod
    async def list_movies_with_booked_counts(self) -> List[Tuple[MovieEntity, int]]:
        """All movies ordered by id, each with its number of booked seats"""
        pass

    @abstractmethod
    async def count_booked_seats(self, *, movie_id: int) -> int:
        pass

    @abstractmethod
    async def list_seats(self, *, movie_id: int) -> List[SeatStatus]:
        """
        Raises:
            NotFoundError: movie does not exist
        """
        pass

    @abstractmethod
    async def check_availability(self, *, seat_ids: List[int]) -> Set[int]:
        """Subset of seat_ids with no booked_seat row. Side-effect free."""
        pass

    @abstractmethod
    async def lock_seats(self, *, movie_id: int, seat_ids: List[int]) -> List[SeatEntity]:
        """
        Row-lock the requested seats of the movie in id order.

        Only meaningful inside a unit of work; ids that are not seats of the
        movie are simply absent from the result.
        """
        pass
