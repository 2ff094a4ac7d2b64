import attrs


def format_seat_label(row: str, number: int) -> str:
    return f'{row}{number}'


@attrs.define(frozen=True)
class SeatEntity:
    id: int
    movie_id: int
    row: str
    number: int

    @property
    def label(self) -> str:
        return format_seat_label(self.row, self.number)
