"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from src.service.cinema.app.command import book_seats_use_case
from src.service.cinema.app.query import (
    get_booking_confirmation_use_case,
    get_movie_seat_map_use_case,
    list_movies_use_case,
    list_user_bookings_use_case,
)
from src.service.cinema.driving_adapter.http_controller.auth import current_user


WIRE_MODULES: list[ModuleType] = [
    book_seats_use_case,
    get_booking_confirmation_use_case,
    get_movie_seat_map_use_case,
    list_movies_use_case,
    list_user_bookings_use_case,
    current_user,
]
