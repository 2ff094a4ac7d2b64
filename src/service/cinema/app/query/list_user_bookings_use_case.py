from typing import List, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.cinema.app.dto.booking_view import BookingHistoryEntry
from src.service.cinema.app.interface.i_reservation_ledger_repo import IReservationLedgerRepo


class ListUserBookingsUseCase:
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
    async def list_user_bookings(self, *, user_id: int) -> List[BookingHistoryEntry]:
        return [
            entry
            async for entry in self.reservation_ledger_repo.list_user_bookings(user_id=user_id)
        ]
