from sqlalchemy import ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.db_setting import Base


class SeatModel(Base):
    __tablename__ = 'seat'
    __table_args__ = (
        UniqueConstraint('movie_id', 'seat_row', 'seat_number', name='uq_seat_movie_row_number'),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    movie_id: Mapped[int] = mapped_column(
        Integer, ForeignKey('movie.id', ondelete='CASCADE'), nullable=False, index=True
    )
    seat_row: Mapped[str] = mapped_column(String(1), nullable=False)
    seat_number: Mapped[int] = mapped_column(Integer, nullable=False)

    def __repr__(self):
        return f'<SeatModel(id={self.id}, movie_id={self.movie_id}, seat={self.seat_row}{self.seat_number})>'
