from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.cinema.app.dto.booking_view import BookingDetail
from src.service.cinema.app.interface.i_reservation_ledger_repo import IReservationLedgerRepo


class GetBookingConfirmationUseCase:
    def __init__(self, *, reservation_ledger_repo: IReservationLedgerRepo):
        self.reservation_ledger_repo = reservation_ledger_repo

    @classmethod
    @inject
    def depends(
        cls,
        reservation_ledger_repo: IReservationLedgerRepo = Depends(
            Provide[Container.reservation_ledger_repo]
        ),
    ) -> Self:
        return cls(reservation_ledger_repo=reservation_ledger_repo)

    @Logger.io
    async def get_confirmation(
        self, *, booking_id: UUID, user_id: Optional[int] = None
    ) -> BookingDetail:
        """
        Raises:
            NotFoundError: booking absent, or not owned by user_id when one is given
        """
        detail = await self.reservation_ledger_repo.get_booking_detail(booking_id=booking_id)

        # Someone else's booking looks exactly like a missing one
        if user_id is not None and detail.user_id != user_id:
            raise NotFoundError('Booking not found')

        return detail
