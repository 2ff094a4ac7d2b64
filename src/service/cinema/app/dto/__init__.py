"""Application layer DTOs"""

from src.service.cinema.app.dto.booking_view import BookingDetail, BookingHistoryEntry
from src.service.cinema.app.dto.movie_view import MovieSeatMap, MovieSummary
from src.service.cinema.app.dto.seat_status import SeatStatus

__all__ = [
    'BookingDetail',
    'BookingHistoryEntry',
    'MovieSeatMap',
    'MovieSummary',
    'SeatStatus',
]
