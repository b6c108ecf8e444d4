from __future__ import annotations
import logging
from functools import wraps
from typing import Any, Callable, Tuple, Type

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def configure_logging(verbose: bool = False) -> None:
    """Send treestore debug output to stderr when ``verbose`` is set."""
    if not verbose:
        return
    logging.basicConfig(level=logging.WARNING, format=LOG_FORMAT)
    logging.getLogger("treestore").setLevel(logging.DEBUG)


def log_calls(
    logger_name: str | None = None,
    *,
    expected: Tuple[Type[BaseException], ...] = (),
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorator to log store operations at DEBUG level.

    Exceptions listed in ``expected`` are caller errors and are logged at DEBUG
    without a traceback; anything else is logged with its traceback. Both are
    re-raised.
    """

    def _decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        name = logger_name or func.__module__
        logger = logging.getLogger(name)

        @wraps(func)
        def _wrapper(*args: Any, **kwargs: Any) -> Any:
            logger.debug("Calling %s args=%s kwargs=%s", func.__qualname__, args, kwargs)
            try:
                result = func(*args, **kwargs)
            except expected as e:
                logger.debug("%s rejected: %s", func.__qualname__, e)
                raise
            except Exception as e:
                logger.exception("Error in %s: %s", func.__qualname__, e)
                raise
            logger.debug("%s returned %r", func.__qualname__, result)
            return result

        return _wrapper

    return _decorator
