from abc import ABC, abstractmethod
from datetime import datetime
from typing import AsyncIterator, List, Optional

from uuid_utils import UUID

from src.service.cinema.app.dto.booking_view import BookingDetail, BookingHistoryEntry


class IReservationLedgerRepo(ABC):
    """Bookings and the seats each booking claims"""

    @abstractmethod
    async def record_booking(
        self,
        *,
        booking_id: UUID,
        movie_id: int,
        user_id: int,
        seat_ids: List[int],
        booking_time: Optional[datetime] = None,
    ) -> UUID:
        """
        Insert the booking and one booked_seat row per seat, then flush.

        A seat already claimed surfaces as the store's IntegrityError.
        """
        pass

    @abstractmethod
    async def user_exists(self, *, user_id: int) -> bool:
        pass

    @abstractmethod
    async def get_booking_detail(self, *, booking_id: UUID) -> BookingDetail:
        """
        Raises:
            NotFoundError: booking does not exist
        """
        pass

    @abstractmethod
    def list_user_bookings(self, *, user_id: int) -> AsyncIterator[BookingHistoryEntry]:
        """Stream the user's bookings, newest first"""
        pass
