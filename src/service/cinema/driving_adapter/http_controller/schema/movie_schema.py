from datetime import date
from typing import List, Optional

from pydantic import BaseModel


class MovieResponse(BaseModel):
    id: int
    title: str
    genre: Optional[str] = None
    duration_minutes: Optional[int] = None
    capacity: int
    available_seats: int


class SeatResponse(BaseModel):
    seat_id: int
    row: str
    number: int
    label: str
    is_booked: bool


class MovieSeatMapResponse(BaseModel):
    model_config = {
        'json_schema_extra': {
            'example': {
                'id': 1,
                'title': 'Inception',
                'genre': 'Sci-Fi',
                'duration_minutes': 148,
                'description': 'A thief who steals corporate secrets...',
                'release_date': '2010-07-16',
                'poster_url': None,
                'capacity': 100,
                'booked_count': 1,
                'available_seats': 99,
                'seats': [
                    {'seat_id': 1, 'row': 'A', 'number': 1, 'label': 'A1', 'is_booked': True},
                    {'seat_id': 2, 'row': 'A', 'number': 2, 'label': 'A2', 'is_booked': False},
                ],
            }
        },
    }

    id: int
    title: str
    genre: Optional[str] = None
    duration_minutes: Optional[int] = None
    description: Optional[str] = None
    release_date: Optional[date] = None
    poster_url: Optional[str] = None
    capacity: int
    booked_count: int
    available_seats: int
    seats: List[SeatResponse]
