"""
Cinema Booking Service - Main Application
Movie listing, seat maps, seat booking and booking history.

Run with:
    granian --interface asgi src.service.cinema.main:app
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.platform.app_factory import create_app
from src.platform.config.core_setting import settings
from src.platform.config.di import container, setup
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.database.orm_db_setting import create_db_and_tables, dispose_engine, get_engine
from src.platform.logging.loguru_io import Logger
from src.platform.observability.tracing import TracingConfig


SERVICE_NAME = 'cinema-booking'


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifespan: startup and shutdown"""
    Logger.base.info('🚀 [Cinema Service] Starting up...')

    tracing = TracingConfig(service_name=SERVICE_NAME)
    tracing.setup()

    setup()
    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Cinema Service] Dependency injection wired')

    engine = get_engine()
    tracing.instrument_sqlalchemy(engine=engine)
    Logger.base.info('🗄️  [Cinema Service] Database engine ready + instrumented')

    # Alembic owns the schema outside of local development
    if settings.DEBUG:
        await create_db_and_tables()
        Logger.base.info('🗄️  [Cinema Service] Database tables ensured')

    Logger.base.info('✅ [Cinema Service] Startup complete')

    yield

    Logger.base.info('🛑 [Cinema Service] Shutting down...')

    await dispose_engine()
    Logger.base.info('🗄️  [Cinema Service] Database engine disposed')

    # Flush remaining spans
    tracing.shutdown()

    container.unwire()

    Logger.base.info('👋 [Cinema Service] Shutdown complete')


app = create_app(lifespan=lifespan, service_name=SERVICE_NAME)
