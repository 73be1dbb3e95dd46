"""
Centralized logger configuration for datatransfer.

By default, uses Python's standard logging with the 'datatransfer' namespace.
The runner receives its logger explicitly; this module only decides what
that logger is when the caller does not supply one.

Usage:
    from datatransfer.core.logger import get_logger
    logger = get_logger(__name__)
    logger.info("Message")

    # Set custom logger (e.g., structlog, loguru)
    from datatransfer.core.logger import set_logger
    import structlog
    set_logger(structlog.get_logger())
"""

import logging
from typing import Any

_custom_logger: Any = None


def set_logger(logger: Any) -> None:
    """
    Set a custom logger returned by every later get_logger() call.

    Args:
        logger: A logger instance supporting debug/info/warning/error/exception.
                Pass None to go back to standard logging.
    """
    global _custom_logger
    _custom_logger = logger


def get_logger(name: str = "datatransfer") -> Any:
    """
    Get a logger instance.

    If a custom logger was set via set_logger(), returns that.
    Otherwise, returns a standard Python logger with the given name.
    """
    if _custom_logger is not None:
        return _custom_logger

    logger = logging.getLogger(name)

    # Ensure we have at least a NullHandler to avoid "No handler found" warnings
    if not logger.handlers:
        logger.addHandler(logging.NullHandler())

    return logger


def configure_default_logging(
    level: int = logging.INFO,
    format_string: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    rich: bool = False,
) -> None:
    """
    Configure console logging for the datatransfer namespace.

    Args:
        level: Logging level (default: INFO)
        format_string: Log message format (ignored when rich=True)
        rich: Render through rich's RichHandler instead of a plain stream
    """
    if rich:
        from rich.logging import RichHandler

        logging.basicConfig(
            level=level,
            format="%(message)s",
            datefmt="[%X]",
            handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        )
    else:
        logging.basicConfig(level=level, format=format_string)

    logging.getLogger("datatransfer").setLevel(level)
