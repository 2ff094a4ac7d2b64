from typing import List

from fastapi import APIRouter, Depends, status

from src.platform.logging.loguru_io import Logger
from src.service.cinema.app.query.get_movie_seat_map_use_case import GetMovieSeatMapUseCase
from src.service.cinema.app.query.list_movies_use_case import ListMoviesUseCase
from src.service.cinema.driving_adapter.http_controller.schema.movie_schema import (
    MovieResponse,
    MovieSeatMapResponse,
    SeatResponse,
)


router = APIRouter()


@router.get('', status_code=status.HTTP_200_OK)
@Logger.io
async def list_movies(
    use_case: ListMoviesUseCase = Depends(ListMoviesUseCase.depends),
) -> List[MovieResponse]:
    movies = await use_case.list_movies()
    return [
        MovieResponse(
            id=movie.id,
            title=movie.title,
            genre=movie.genre,
            duration_minutes=movie.duration_minutes,
            capacity=movie.capacity,
            available_seats=movie.available_seats,
        )
        for movie in movies
    ]


@router.get('/{movie_id}', status_code=status.HTTP_200_OK)
@Logger.io
async def get_movie_seat_map(
    movie_id: int,
    use_case: GetMovieSeatMapUseCase = Depends(GetMovieSeatMapUseCase.depends),
) -> MovieSeatMapResponse:
    seat_map = await use_case.get_seat_map(movie_id=movie_id)
    movie = seat_map.movie

    return MovieSeatMapResponse(
        id=movie.id,
        title=movie.title,
        genre=movie.genre,
        duration_minutes=movie.duration_minutes,
        description=movie.description,
        release_date=movie.release_date,
        poster_url=movie.poster_url,
        capacity=movie.capacity,
        booked_count=seat_map.booked_count,
        available_seats=seat_map.available_seats,
        seats=[
            SeatResponse(
                seat_id=seat.seat_id,
                row=seat.row,
                number=seat.number,
                label=seat.label,
                is_booked=seat.is_booked,
            )
            for seat in seat_map.seats
        ],
    )
