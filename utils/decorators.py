"""
Decorators for serializing AWS calls and tracing utility operations.
"""
import functools
import logging
import threading
from typing import Any, Callable, TypeVar

from logger_config import get_logger

logger = get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

# Not re-entrant: a serialized method must not call another serialized method.
_process_lock = threading.Lock()


def get_process_lock() -> threading.Lock:
    """Return the lock shared by every AWS service that is not given its own."""
    return _process_lock


def serialized(func: F) -> F:
    """
    Run a service method while holding the instance's ``lock``.

    Services default to the process-wide lock, so at most one queue or
    table call is in flight per process unless a caller injects a
    separate lock.
    """
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs):
        with self.lock:
            return func(self, *args, **kwargs)

    return wrapper  # type: ignore[return-value]


def traced(func: F) -> F:
    """
    Log entry and exit of a call at DEBUG level.

    Arguments and results are logged with ``repr``; keep secrets out of
    the argument list of decorated functions.
    """
    name = func.__qualname__

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        if logger.isEnabledFor(logging.DEBUG):
            shown = [repr(a) for a in args[1:]] if _is_method(func, args) else [repr(a) for a in args]
            shown += [f"{k}={v!r}" for k, v in kwargs.items()]
            logger.debug(f"Entering {name}() with: [{', '.join(shown)}]")

        result = func(*args, **kwargs)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Exiting {name}() with: [{result!r}]")
        return result

    return wrapper  # type: ignore[return-value]


def _is_method(func: Callable[..., Any], args: tuple) -> bool:
    """True when the first positional argument is the bound instance."""
    return bool(args) and "." in func.__qualname__ and hasattr(args[0], func.__name__)
