from typing import List, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.cinema.app.dto.movie_view import MovieSummary
from src.service.cinema.app.interface.i_seat_inventory_repo import ISeatInventoryRepo


class ListMoviesUseCase:
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
    async def list_movies(self) -> List[MovieSummary]:
        movies = await self.seat_inventory_repo.list_movies_with_booked_counts()
        return [
            MovieSummary(
                id=movie.id,
                title=movie.title,
                genre=movie.genre,
                duration_minutes=movie.duration_minutes,
                capacity=movie.capacity,
                available_seats=movie.available_seats(booked_count),
            )
            for movie, booked_count in movies
        ]
