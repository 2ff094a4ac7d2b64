from inspect import Signature, getsourcelines
from os.path import basename
import re
from time import time
from typing import Any, Callable

from src.platform.logging.loguru_io_config import (
    MAX_CONTENT_LENGTH,
    SENSITIVE_KEYWORDS,
    call_depth_var,
    chain_start_time_var,
)


MASK = '********'
_SENSITIVE_ASSIGNMENT = re.compile(
    r"(\b(?:" + '|'.join(sorted(SENSITIVE_KEYWORDS)) + r")\b)(\s*[=:]\s*)'[^']*'",
    re.IGNORECASE,
)
_IMPLICIT_PARAMS = ('self', 'cls')


def enter_call() -> float:
    """Track nesting of decorated calls; the outermost call starts the chain clock"""
    call_depth_var.set(call_depth_var.get() + 1)
    if not (start_time := chain_start_time_var.get()):
        start_time = time()
        chain_start_time_var.set(start_time)
    return start_time


def reset_call_depth() -> None:
    layer = call_depth_var.get() - 1
    call_depth_var.set(layer)
    if layer <= 0:
        chain_start_time_var.set(0)


def describe_call_target(func: Callable[..., Any]) -> str:
    target = getattr(func, '__func__', func)
    lineno = getsourcelines(target)[1]
    return f'{basename(target.__code__.co_filename)}::{func.__qualname__}:{lineno}'


def bind_call_arguments(signature: Signature, args: tuple, kwargs: dict) -> dict[str, Any]:
    """Name every argument of a call, dropping self/cls"""
    try:
        bound = signature.bind_partial(*args, **kwargs)
    except TypeError:
        # Let the wrapped call raise its own error
        return {'args': args, 'kwargs': kwargs}
    return {k: v for k, v in bound.arguments.items() if k not in _IMPLICIT_PARAMS}


def mask_sensitive(data: Any) -> Any:
    if isinstance(data, dict):
        return {
            key: MASK if key in SENSITIVE_KEYWORDS else mask_sensitive(value)
            for key, value in data.items()
        }
    if isinstance(data, list | tuple):
        return type(data)(mask_sensitive(item) for item in data)

    try:
        text = str(data)
    except Exception:
        return data
    masked = _SENSITIVE_ASSIGNMENT.sub(rf"\1\2'{MASK}'", text)
    return data if masked == text else masked


def truncate_content(data: Any, max_length: int = MAX_CONTENT_LENGTH) -> Any:
    if isinstance(data, (int, float, bool)) or data is None:
        return data
    text = str(data)
    if len(text) <= max_length:
        return data
    return f'{text[:max_length]}...(+{len(text) - max_length} chars)'
