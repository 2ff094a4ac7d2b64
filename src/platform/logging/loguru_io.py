from collections.abc import AsyncGenerator, Iterator
from contextlib import contextmanager
from functools import wraps
from inspect import isasyncgenfunction, iscoroutinefunction, signature
import types
from typing import TYPE_CHECKING, Any, Callable, ParamSpec, TypeVar, cast, overload


if TYPE_CHECKING:
    from loguru import Logger as LoguruLogger

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import CustomBaseError
from src.platform.logging.generator_wrapper import AsyncGeneratorWrapper
from src.platform.logging.loguru_io_config import ExtraField, booking_id_var, custom_logger
from src.platform.logging.loguru_io_utils import (
    bind_call_arguments,
    describe_call_target,
    enter_call,
    mask_sensitive,
    reset_call_depth,
    truncate_content,
)


_F = TypeVar('_F', bound=Callable[..., Any])


class LoguruIO:
    """
    Decorator logging the arguments and return value (DEBUG) or the exception
    (ERROR) of a call. Domain errors are logged without a traceback.

    Coroutines, async generators and plain functions are supported.
    """

    def __init__(
        self, custom_logger: 'LoguruLogger', *, reraise: bool = True, truncate_content: bool = False
    ) -> None:
        self._custom_logger = custom_logger
        self.reraise = reraise
        self.truncate_content = truncate_content
        self.call_target = ''
        self.depth = 2  # wrapper + helper frames

    # -- logging helpers -------------------------------------------------

    def enter(self) -> dict[str, Any]:
        return {
            ExtraField.CALL_TARGET: self.call_target,
            ExtraField.CHAIN_START_TIME: enter_call(),
        }

    def exit(self) -> None:
        reset_call_depth()

    def render(self, data: Any) -> Any:
        masked = mask_sensitive(data)
        return truncate_content(masked) if self.truncate_content else masked

    def log_debug(self, extra: dict[str, Any], message: str) -> None:
        # Rendering is skipped entirely outside DEBUG
        if settings.DEBUG:
            self._custom_logger.bind(**extra).opt(depth=self.depth).debug(message)

    def log_exception(self, extra: dict[str, Any], e: Exception) -> None:
        # An exception bubbling through several decorated calls is logged once
        if getattr(e, '_has_logged', False):
            return
        e._has_logged = True  # type: ignore[attr-defined]
        bound = self._custom_logger.bind(**extra).opt(depth=self.depth + 1)
        if isinstance(e, CustomBaseError):
            bound.error(f'{type(e).__name__}: {e}')
        else:
            bound.exception(f'{type(e).__name__}: {e}')

    def _hide_from_traceback(self, func: Callable[..., Any]) -> Callable[..., Any]:
        func.__code__ = func.__code__.replace(  # type: ignore[attr-defined]
            co_filename=cast(types.FunctionType, self._custom_logger.catch).__code__.co_filename
        )
        return func

    # -- wrappers --------------------------------------------------------

    def __call__(self, func: _F) -> _F:
        self.call_target = describe_call_target(func)
        sig = signature(func)

        def log_call(extra: dict[str, Any], args: tuple, kwargs: dict) -> None:
            if settings.DEBUG:
                self.log_debug(extra, f'call: {self.render(bind_call_arguments(sig, args, kwargs))}')

        if iscoroutinefunction(func):

            @wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                extra = self.enter()
                try:
                    log_call(extra, args, kwargs)
                    return_value = await func(*args, **kwargs)
                    self.log_debug(extra, f'return: {self.render(return_value)}')
                    return return_value
                except Exception as e:
                    self.log_exception(extra, e)
                    if self.reraise:
                        raise
                    return None
                finally:
                    self.exit()

            wrapper: Callable[..., Any] = async_wrapper

        elif isasyncgenfunction(func):

            @wraps(func)
            def async_generator_wrapper(*args: Any, **kwargs: Any) -> AsyncGeneratorWrapper:
                extra = self.enter()
                try:
                    log_call(extra, args, kwargs)
                    gen_obj = cast(AsyncGenerator[Any, Any], func(*args, **kwargs))
                    return AsyncGeneratorWrapper(gen_obj, self)
                finally:
                    self.exit()

            wrapper = async_generator_wrapper

        else:

            @wraps(func)
            def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
                extra = self.enter()
                try:
                    log_call(extra, args, kwargs)
                    return_value = func(*args, **kwargs)
                    self.log_debug(extra, f'return: {self.render(return_value)}')
                    return return_value
                except Exception as e:
                    self.log_exception(extra, e)
                    if self.reraise:
                        raise
                    return None
                finally:
                    self.exit()

            wrapper = sync_wrapper

        return cast(_F, self._hide_from_traceback(wrapper))


_P = ParamSpec('_P')
_T = TypeVar('_T')


class Logger:
    base = custom_logger

    @overload
    @staticmethod
    def io(func: Callable[_P, _T]) -> Callable[_P, _T]: ...

    @overload
    @staticmethod
    def io(func: None = ..., *, reraise: bool = ..., truncate_content: bool = ...) -> LoguruIO: ...

    @staticmethod
    def io(
        func: Callable[_P, _T] | None = None, *, reraise: bool = True, truncate_content: bool = True
    ) -> Callable[_P, _T] | LoguruIO:
        loguru_io = LoguruIO(
            custom_logger=custom_logger, reraise=reraise, truncate_content=truncate_content
        )
        return loguru_io(func) if func else loguru_io

    @staticmethod
    @contextmanager
    def booking_context(booking_id: Any) -> Iterator[None]:
        """Tag every record logged inside the block with the booking id"""
        token = booking_id_var.set(str(booking_id))
        try:
            yield
        finally:
            booking_id_var.reset(token)
