"""
Unit of Work Pattern - one session, one transaction, shared by the repositories inside it

Architecture:
- UoW owns the session lifecycle (created on enter, closed on exit)
- UoW owns commit/rollback; exiting without commit always rolls back
- Repositories receive the shared session from the UoW, never a global handle
- The booking coordinator creates a fresh UoW per attempt
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING, Callable, Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.config.core_setting import settings


if TYPE_CHECKING:
    from src.service.cinema.app.interface.i_reservation_ledger_repo import (
        IReservationLedgerRepo,
    )
    from src.service.cinema.app.interface.i_seat_inventory_repo import ISeatInventoryRepo


class AbstractUnitOfWork(abc.ABC):
    """
    Usage:
        async with uow:
            seats = await uow.seat_inventory_repo.lock_seats(...)
            await uow.reservation_ledger_repo.record_booking(...)
            await uow.commit()
    """

    seat_inventory_repo: ISeatInventoryRepo
    reservation_ledger_repo: IReservationLedgerRepo

    async def __aenter__(self) -> AbstractUnitOfWork:
        return self

    async def __aexit__(self, *args) -> None:
        await self.rollback()

    async def commit(self) -> None:
        await self._commit()

    @abc.abstractmethod
    async def _commit(self) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    async def rollback(self) -> None:
        raise NotImplementedError


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):
    def __init__(
        self,
        session_factory: Callable[[], AsyncSession],
        *,
        lock_timeout_ms: Optional[int] = None,
    ) -> None:
        self.session_factory = session_factory
        self.lock_timeout_ms = (
            settings.BOOKING_LOCK_TIMEOUT_MS if lock_timeout_ms is None else lock_timeout_ms
        )
        self.session: AsyncSession | None = None

    async def __aenter__(self) -> AbstractUnitOfWork:
        from src.service.cinema.driven_adapter.repo.reservation_ledger_repo_impl import (
            ReservationLedgerRepoImpl,
        )
        from src.service.cinema.driven_adapter.repo.seat_inventory_repo_impl import (
            SeatInventoryRepoImpl,
        )

        self.session = self.session_factory()

        # Bounded lock waits: a blocked seat lock fails instead of hanging
        if self.session.get_bind().dialect.name == 'postgresql' and self.lock_timeout_ms > 0:
            try:
                await self.session.execute(
                    text(f"SET LOCAL lock_timeout = '{int(self.lock_timeout_ms)}ms'")
                )
            except BaseException:
                # __aexit__ does not run when __aenter__ raises
                await self.session.close()
                self.session = None
                raise

        self.seat_inventory_repo = SeatInventoryRepoImpl(session=self.session)
        self.reservation_ledger_repo = ReservationLedgerRepoImpl(session=self.session)

        return await super().__aenter__()

    async def __aexit__(self, *args) -> None:
        try:
            await super().__aexit__(*args)
        finally:
            if self.session is not None:
                await self.session.close()
                self.session = None

    async def _commit(self) -> None:
        assert self.session is not None, 'commit() called outside of "async with uow"'
        await self.session.commit()

    async def rollback(self) -> None:
        if self.session is not None:
            await self.session.rollback()
