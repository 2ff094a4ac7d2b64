from datetime import datetime, timezone
from typing import Iterable, Optional, Tuple

import attrs
import uuid_utils
from uuid_utils import UUID

from src.platform.exception.exceptions import ValidationError
from src.platform.logging.loguru_io import Logger


def _is_positive_int(value: object) -> bool:
    # bool is a subclass of int: True must not pass as seat 1
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


@attrs.define(frozen=True)
class Booking:
    """
    A user's claim on a set of seats of one movie.

    Created once per successful booking transaction and never mutated;
    `id` is a UUID7 and doubles as the confirmation reference.
    """

    id: UUID
    movie_id: int
    user_id: int
    seat_ids: Tuple[int, ...]
    booking_time: Optional[datetime] = None

    @property
    def seat_count(self) -> int:
        return len(self.seat_ids)

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        movie_id: int,
        user_id: int,
        seat_ids: Iterable[int],
        max_seats: int,
    ) -> 'Booking':
        """
        Validate a booking request and build the booking it would create

        Raises:
            ValidationError: malformed request (checked before any store access)
        """
        if not _is_positive_int(movie_id):
            raise ValidationError('movie_id must be a positive integer')
        if not _is_positive_int(user_id):
            raise ValidationError('user_id must be a positive integer')

        if not isinstance(seat_ids, (list, tuple, set, frozenset)):
            raise ValidationError('seat_ids must be a list of seat ids')
        requested = tuple(seat_ids)
        if not requested:
            raise ValidationError('No seats selected for booking')
        if not all(_is_positive_int(seat_id) for seat_id in requested):
            raise ValidationError('seat_ids must be positive integers')
        if len(set(requested)) != len(requested):
            raise ValidationError('seat_ids must not contain duplicates')
        if len(requested) > max_seats:
            raise ValidationError(f'Maximum {max_seats} seats per booking')

        return cls(
            id=uuid_utils.uuid7(),
            movie_id=movie_id,
            user_id=user_id,
            seat_ids=tuple(sorted(requested)),
            booking_time=datetime.now(timezone.utc),
        )
