"""Booking read model DTOs."""

from datetime import datetime
from typing import List

import attrs
from uuid_utils import UUID


@attrs.define(frozen=True)
class BookingDetail:
    """Confirmation view of a single booking. seat_labels are ordered by row then number."""

    booking_id: UUID
    movie_id: int
    movie_title: str
    user_id: int
    seat_labels: List[str]
    seat_count: int
    booking_time: datetime


@attrs.define(frozen=True)
class BookingHistoryEntry:
    booking_id: UUID
    movie_title: str
    booking_time: datetime
    seat_labels: List[str]
