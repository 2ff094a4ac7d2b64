"""
Loguru sinks and shared logging state

- Every record carries the service context and, inside a booking, the booking id
- Standard library logging (uvicorn/granian, sqlalchemy, asyncio) is routed into loguru
- Access log lines are leveled by their HTTP status
"""

from contextvars import ContextVar
from datetime import datetime, timezone
from enum import StrEnum
import logging
import os
import re
import sys
from typing import TYPE_CHECKING, Any

from loguru import logger as loguru_logger

from src.platform.config.core_setting import settings
from src.platform.constant.path import LOG_DIR
from src.platform.logging.service_context import get_service_context


if TYPE_CHECKING:
    from loguru import Logger as LoguruLogger


LOG_DIR = os.environ.get('TEST_LOG_DIR', LOG_DIR)

SENSITIVE_KEYWORDS = {'password', 'hashed_password', 'token', 'secret_key'}
MAX_CONTENT_LENGTH = 500

chain_start_time_var: ContextVar[float] = ContextVar('chain_start_time_var', default=0)
call_depth_var: ContextVar[int] = ContextVar('call_depth_var', default=0)
booking_id_var: ContextVar[str] = ContextVar('booking_id_var', default='')


class ExtraField(StrEnum):
    SERVICE_CONTEXT = 'service_context'
    CHAIN_START_TIME = 'chain_start_time'
    CALL_TARGET = 'call_target'
    BOOKING_ID = 'booking_id'


class GeneratorMethod(StrEnum):
    NEXT = 'next'
    CLOSE = 'close'


# '127.0.0.1 - "POST /api/bookings HTTP/1.1" - 409 - 8ms'
_ACCESS_LOG_STATUS = re.compile(r'"[A-Z]+ \S+ HTTP/[\d.]+" - (\d{3})\b')
_STATUS_LEVELS = ((500, 'CRITICAL'), (400, 'ERROR'), (300, 'WARNING'), (200, 'SUCCESS'))
_MUTED_DEBUG_LOGGERS = ('asyncio', 'sqlalchemy', 'aiosqlite')


def access_log_level(message: str) -> str | None:
    if not (match := _ACCESS_LOG_STATUS.search(message)):
        return None
    status_code = int(match.group(1))
    return next((level for floor, level in _STATUS_LEVELS if status_code >= floor), 'INFO')


def _attach_booking_id(record: Any) -> None:
    record['extra'][ExtraField.BOOKING_ID] = booking_id_var.get()


def _bind_defaults(base: 'LoguruLogger') -> 'LoguruLogger':
    return base.bind(
        **{
            ExtraField.SERVICE_CONTEXT: get_service_context(),
            ExtraField.CHAIN_START_TIME: '',
            ExtraField.CALL_TARGET: '',
            ExtraField.BOOKING_ID: '',
        }
    )


class InterceptHandler(logging.Handler):
    _bound_logger: 'LoguruLogger | None' = None

    def emit(self, record: logging.LogRecord) -> None:
        if record.levelno <= logging.DEBUG and record.name.startswith(_MUTED_DEBUG_LOGGERS):
            return

        message = record.getMessage()
        level: str | int | None = access_log_level(message)
        if level is None:
            try:
                level = loguru_logger.level(record.levelname).name
            except ValueError:
                level = record.levelno

        # Report the frame that called the stdlib logger, not logging internals
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back  # type: ignore
            depth += 1

        if InterceptHandler._bound_logger is None:
            InterceptHandler._bound_logger = _bind_defaults(loguru_logger)
        InterceptHandler._bound_logger.opt(depth=depth, exception=record.exc_info).log(
            level, message
        )


io_log_format = ' | '.join(
    (
        f'<c>{{extra[{ExtraField.SERVICE_CONTEXT}]}}</>',
        '<lvl>{level:<8}</>',
        f'<c>{{file}}::{{function}}:{{line}}</>=><y>{{extra[{ExtraField.CALL_TARGET}]}}</>',
        f'<m>{{extra[{ExtraField.BOOKING_ID}]}}</>',
        '{message}',
        '<lk>{elapsed}</>',
        f'<lk>{{extra[{ExtraField.CHAIN_START_TIME}]:<18}}</>',
    )
)

min_log_level = 'DEBUG' if settings.DEBUG else 'INFO'

loguru_logger.remove()
loguru_logger.configure(patcher=_attach_booking_id)
custom_logger = _bind_defaults(loguru_logger)

if settings.LOG_JSON:
    custom_logger.add(sys.stdout, serialize=True, level=min_log_level, enqueue=True)
else:
    custom_logger.add(sys.stdout, format=io_log_format, level=min_log_level, enqueue=True)

if settings.DEBUG:
    hour = datetime.now(timezone.utc).strftime('%Y-%m-%d_%H')
    prefix = 'test_' if os.environ.get('TEST_LOG_DIR') else ''
    custom_logger.add(
        f'{LOG_DIR}/{prefix}{hour}.log',
        format=io_log_format,
        rotation='1 hour',
        retention='7 days',
        compression='gz',
        enqueue=True,
        level=min_log_level,
    )

logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
