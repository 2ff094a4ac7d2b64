"""
Test Configuration and Fixtures

This module provides:
- Environment setup (SQLite database, log directory) before any app import
- Per-test SQLite databases for repository / use case integration tests
- A session-scoped TestClient running the real app against its own SQLite file
- Seed data: two movies with a few seats each and two users

Architecture:
- Unit tests (marked unit): mock repositories and unit of work, no fixtures here needed
- Integration tests: real repositories and unit of work on a temp SQLite file (aiosqlite)
- HTTP tests: FastAPI TestClient, seeded through the client's own event loop
"""

# =============================================================================
# CRITICAL: Environment setup MUST happen before any other imports
# Settings are read at import time (core_setting.settings)
# =============================================================================
import os
from pathlib import Path
import tempfile


def _early_setup_test_environment() -> None:
    """Set test environment variables before any module imports."""
    db_dir = Path(tempfile.mkdtemp(prefix='cinema_test_'))
    os.environ['DATABASE_URL'] = f'sqlite+aiosqlite:///{db_dir / "cinema_http.db"}'
    os.environ.setdefault('SECRET_KEY', 'test_secret_key')
    os.environ.setdefault('BOOKING_RETRY_DELAY_SECONDS', '0')

    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)


# Call immediately to set env vars before any imports
_early_setup_test_environment()

from collections.abc import AsyncGenerator, AsyncIterator, Callable, Generator  # noqa: E402
from contextlib import asynccontextmanager  # noqa: E402
from datetime import date  # noqa: E402
from typing import Any  # noqa: E402

from fastapi import FastAPI  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
import pytest  # noqa: E402
from sqlalchemy import delete  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker  # noqa: E402

from src.platform.app_factory import create_app  # noqa: E402
from src.platform.config.di import container  # noqa: E402
from src.platform.config.wire_modules import WIRE_MODULES  # noqa: E402
from src.platform.database.orm_db_setting import (  # noqa: E402
    build_async_engine,
    build_session_maker,
    create_db_and_tables,
    dispose_engine,
    get_session_maker,
)
from src.platform.database.unit_of_work import SqlAlchemyUnitOfWork  # noqa: E402
from src.platform.logging.loguru_io import Logger  # noqa: E402
from src.service.cinema.driven_adapter.model import (  # noqa: E402
    BookedSeatModel,
    BookingModel,
    MovieModel,
    SeatModel,
    UserModel,
)
from src.service.cinema.driven_adapter.repo.reservation_ledger_repo_impl import (  # noqa: E402
    ReservationLedgerRepoImpl,
)
from src.service.cinema.driven_adapter.repo.seat_inventory_repo_impl import (  # noqa: E402
    SeatInventoryRepoImpl,
)
from src.service.cinema.driving_adapter.http_controller.auth.jwt_auth import JwtAuth  # noqa: E402


# =============================================================================
# Seed Data
# =============================================================================
async def clear_cinema_tables(session_maker: async_sessionmaker[AsyncSession]) -> None:
    async with session_maker() as session:
        for model in (BookedSeatModel, BookingModel, SeatModel, MovieModel, UserModel):
            await session.execute(delete(model))
        await session.commit()


async def seed_cinema(session_maker: async_sessionmaker[AsyncSession]) -> dict[str, Any]:
    """
    Two movies and two users.

    - Inception (capacity 100): seats A1, A2, A3, B1
    - Spirited Away (capacity 2): seats A1, A2
    """
    async with session_maker() as session:
        alice = UserModel(name='Alice', email='alice@example.com', hashed_password='x')
        bob = UserModel(name='Bob', email='bob@example.com', hashed_password='x')
        inception = MovieModel(
            title='Inception',
            genre='Sci-Fi',
            duration_minutes=148,
            description='A thief who steals corporate secrets through dream-sharing',
            release_date=date(2010, 7, 16),
            capacity=100,
        )
        spirited_away = MovieModel(
            title='Spirited Away', genre='Animation', duration_minutes=125, capacity=2
        )
        session.add_all([alice, bob, inception, spirited_away])
        await session.flush()

        seats = {
            label: SeatModel(movie_id=inception.id, seat_row=label[0], seat_number=int(label[1:]))
            for label in ('A1', 'A2', 'A3', 'B1')
        }
        small_seats = {
            label: SeatModel(
                movie_id=spirited_away.id, seat_row=label[0], seat_number=int(label[1:])
            )
            for label in ('A1', 'A2')
        }
        session.add_all([*seats.values(), *small_seats.values()])
        await session.commit()

        return {
            'movie_id': inception.id,
            'small_movie_id': spirited_away.id,
            'user_id': alice.id,
            'other_user_id': bob.id,
            'seats': {label: seat.id for label, seat in seats.items()},
            'small_seats': {label: seat.id for label, seat in small_seats.items()},
        }


# =============================================================================
# Integration Test Fixtures (per-test SQLite file)
# =============================================================================
@pytest.fixture
async def engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    """Fresh SQLite file per test: every session gets its own connection"""
    test_engine = build_async_engine(f'sqlite+aiosqlite:///{tmp_path / "cinema.db"}')
    await create_db_and_tables(test_engine)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return build_session_maker(engine)


@pytest.fixture
async def seed(session_maker: async_sessionmaker[AsyncSession]) -> dict[str, Any]:
    return await seed_cinema(session_maker)


@pytest.fixture
def uow_factory(
    session_maker: async_sessionmaker[AsyncSession],
) -> Callable[[], SqlAlchemyUnitOfWork]:
    """A new unit of work (and session) per call, like the DI factory provider"""
    return lambda: SqlAlchemyUnitOfWork(session_maker)


@pytest.fixture
def seat_inventory_repo(session_maker: async_sessionmaker[AsyncSession]) -> SeatInventoryRepoImpl:
    return SeatInventoryRepoImpl(session_factory=session_maker)


@pytest.fixture
def reservation_ledger_repo(
    session_maker: async_sessionmaker[AsyncSession],
) -> ReservationLedgerRepoImpl:
    return ReservationLedgerRepoImpl(session_factory=session_maker)


# =============================================================================
# HTTP Fixtures (session-scoped app, DATABASE_URL from the environment)
# =============================================================================
@asynccontextmanager
async def lifespan_for_tests(app: FastAPI) -> AsyncIterator[None]:
    """Minimal lifespan for testing - no tracing exporter, tables created directly"""
    Logger.base.info('🧪 [Test App] Starting up...')

    await create_db_and_tables()
    container.wire(modules=WIRE_MODULES)
    Logger.base.info('✅ [Test App] Startup complete')

    yield

    container.unwire()
    await dispose_engine()
    Logger.base.info('👋 [Test App] Shutdown complete')


@pytest.fixture(scope='session')
def client() -> Generator[TestClient, None, None]:
    app = create_app(
        lifespan=lifespan_for_tests,
        title_suffix=' (Test)',
        service_name='test-cinema-booking',
    )
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture
def http_seed(client: TestClient) -> Generator[dict[str, Any], None, None]:
    """Reset and seed the app database on the app's own event loop"""

    async def _reset_and_seed() -> dict[str, Any]:
        session_maker = get_session_maker()
        await clear_cinema_tables(session_maker)
        return await seed_cinema(session_maker)

    assert client.portal is not None
    client.cookies.clear()
    yield client.portal.call(_reset_and_seed)
    client.cookies.clear()


@pytest.fixture(scope='session')
def jwt_auth() -> JwtAuth:
    return JwtAuth()


@pytest.fixture
def auth_headers(jwt_auth: JwtAuth) -> Callable[[int], dict[str, str]]:
    """Session cookie header for the given user id"""

    def _headers(user_id: int) -> dict[str, str]:
        token = jwt_auth.create_jwt_token(user_id=user_id)
        return {'Cookie': f'{container.config_service().AUTH_COOKIE_NAME}={token}'}

    return _headers
