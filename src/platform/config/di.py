"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.platform.database.db_setting import Database
from src.platform.database.unit_of_work import SqlAlchemyUnitOfWork
from src.platform.metrics.booking_metrics import metrics as booking_metrics
from src.service.cinema.driven_adapter.repo.reservation_ledger_repo_impl import (
    ReservationLedgerRepoImpl,
)
from src.service.cinema.driven_adapter.repo.seat_inventory_repo_impl import SeatInventoryRepoImpl
from src.service.cinema.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Database (uses AsyncEngineManager with settings from config_service)
    database = providers.Singleton(Database)

    # Unit of work: a new instance (and session) per booking attempt
    unit_of_work = providers.Factory(
        SqlAlchemyUnitOfWork,
        session_factory=database.provided.new_session,
        lock_timeout_ms=config_service.provided.BOOKING_LOCK_TIMEOUT_MS,
    )

    # Repositories for read services (stateless - use session_factory per-request)
    seat_inventory_repo = providers.Singleton(
        SeatInventoryRepoImpl, session_factory=database.provided.session
    )
    reservation_ledger_repo = providers.Singleton(
        ReservationLedgerRepoImpl, session_factory=database.provided.session
    )

    # Auth service
    jwt_auth = providers.Singleton(JwtAuth)

    # Prometheus collectors register globally: always the module level instance
    booking_metrics = providers.Object(booking_metrics)


container = Container()


def setup() -> None:
    container.config_service()
    container.database()


def cleanup() -> None:
    container.reset_singletons()
