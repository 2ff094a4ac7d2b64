"""FastAPI app factory shared by the service entrypoint and the test suite"""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from src.platform.config.core_setting import settings
from src.platform.database.orm_db_setting import get_engine
from src.platform.exception.exception_handlers import register_exception_handlers
from src.platform.logging.loguru_io import Logger
from src.platform.observability.tracing import TracingConfig
from src.service.cinema.driving_adapter.http_controller.booking_controller import (
    router as booking_router,
)
from src.service.cinema.driving_adapter.http_controller.movie_controller import (
    router as movie_router,
)


def create_app(
    *,
    lifespan: Callable[[FastAPI], AbstractAsyncContextManager[Any]],
    title_suffix: str = '',
    description: str = 'Movie listing, seat maps and seat booking',
    service_name: str = 'cinema-booking',
) -> FastAPI:
    """
    Args:
        lifespan: startup/shutdown of DI wiring, tracing and the database engine
        title_suffix: appended to the OpenAPI title, e.g. ' (Test)'
        service_name: tracing service name
    """
    app = FastAPI(
        title=f'{settings.PROJECT_NAME}{title_suffix}',
        description=description,
        version=settings.VERSION,
        lifespan=lifespan,
    )

    # Must run before routes are mounted
    TracingConfig(service_name=service_name).instrument_fastapi(app=app)

    app.add_middleware(
        CORSMiddleware,  # type: ignore
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,  # session cookie
        allow_methods=['GET', 'POST'],
        allow_headers=['*'],
    )

    register_exception_handlers(app)

    app.include_router(movie_router, prefix='/api/movies', tags=['movie'])
    app.include_router(booking_router, prefix='/api/bookings', tags=['booking'])

    _register_operational_endpoints(app)

    return app


def _register_operational_endpoints(app: FastAPI) -> None:
    @app.get('/health')
    async def health_check() -> JSONResponse:
        """Liveness plus database reachability, 503 when the store is down"""
        body = {'service': settings.PROJECT_NAME}
        try:
            async with get_engine().connect() as conn:
                await conn.execute(text('SELECT 1'))
        except (SQLAlchemyError, OSError) as e:
            Logger.base.warning(f'⚠️ [HEALTH] Database unreachable: {e}')
            return JSONResponse(
                status_code=503, content=body | {'status': 'unhealthy', 'database': 'down'}
            )
        return JSONResponse(content=body | {'status': 'healthy', 'database': 'up'})

    @app.get('/metrics')
    async def get_metrics() -> PlainTextResponse:
        """Prometheus scrape endpoint"""
        return PlainTextResponse(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
