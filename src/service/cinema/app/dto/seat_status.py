"""Seat reservation state DTO."""

import attrs


@attrs.define(frozen=True)
class SeatStatus:
    """
    A seat of a movie together with its derived reservation state.

    is_booked is computed from booked_seat rows at query time, never stored.
    """

    seat_id: int
    row: str
    number: int
    label: str
    is_booked: bool
