from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.cinema.app.dto.movie_view import MovieSeatMap
from src.service.cinema.app.interface.i_seat_inventory_repo import ISeatInventoryRepo


class GetMovieSeatMapUseCase:
    def __init__(self, *, seat_inventory_repo: ISeatInventoryRepo):
        self.seat_inventory_repo = seat_inventory_repo

    @classmethod
    @inject
    def depends(
        cls,
        seat_inventory_repo: ISeatInventoryRepo = Depends(Provide[Container.seat_inventory_repo]),
    ) -> Self:
        return cls(seat_inventory_repo=seat_inventory_repo)

    @Logger.io
    async def get_seat_map(self, *, movie_id: int) -> MovieSeatMap:
        movie = await self.seat_inventory_repo.get_movie(movie_id=movie_id)
        if not movie:
            raise NotFoundError('Movie not found')

        seats = await self.seat_inventory_repo.list_seats(movie_id=movie_id)
        # Counted from the same seat rows as the grid, so the two always agree
        booked_count = sum(1 for seat in seats if seat.is_booked)

        return MovieSeatMap(
            movie=movie,
            seats=seats,
            booked_count=booked_count,
            available_seats=movie.available_seats(booked_count),
        )
