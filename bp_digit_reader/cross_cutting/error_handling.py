"""
Error Handling

Keeps a frame loop alive when a single frame fails.
"""

from typing import Callable, TypeVar, Optional
from functools import wraps
import logging

from ..domain.exceptions import DomainException


logger = logging.getLogger(__name__)

T = TypeVar("T")


def _describe(error: Exception) -> str:
    if isinstance(error, DomainException) and error.details:
        return f"{error} {error.details}"
    return str(error) or error.__class__.__name__


def handle_exception(
    default_factory: Callable[[], T],
    log_level: int = logging.ERROR,
    reraise: bool = False
) -> Callable:
    """
    Turn exceptions raised by the wrapped call into a fallback value.

    Domain errors are logged with their details. Anything else is logged with
    its traceback, since it points at a bug rather than a bad frame.

    Args:
        default_factory: Builds the value returned instead of raising
        log_level: Level used for the log record
        reraise: Log, then let the exception propagate
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs) -> T:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                logger.log(
                    log_level,
                    f"{func.__qualname__} failed: {_describe(e)}",
                    exc_info=not isinstance(e, DomainException)
                )
                if reraise:
                    raise
                return default_factory()
        return wrapper
    return decorator


class ErrorHandler:
    """
    Context manager that logs an exception and optionally swallows it.

    Usage:
        with ErrorHandler(logger, context="release", suppress=True) as handler:
            engine.clear()
        if handler.has_error:
            ...
    """

    def __init__(
        self,
        logger: logging.Logger,
        context: str = "",
        suppress: bool = False
    ):
        self.logger = logger
        self.context = context
        self.suppress = suppress
        self.error: Optional[Exception] = None

    def __enter__(self) -> "ErrorHandler":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if exc_val is None:
            return False

        self.error = exc_val
        prefix = f"[{self.context}] " if self.context else ""
        self.logger.error(
            f"{prefix}{_describe(exc_val)}",
            exc_info=None if isinstance(exc_val, DomainException) else (exc_type, exc_val, exc_tb)
        )
        return self.suppress

    @property
    def has_error(self) -> bool:
        return self.error is not None

    @property
    def error_message(self) -> Optional[str]:
        return str(self.error) if self.error is not None else None

    @property
    def is_recoverable(self) -> bool:
        """Domain errors report this themselves; unknown errors are not recoverable."""
        if isinstance(self.error, DomainException):
            return self.error.is_recoverable
        return self.error is None
