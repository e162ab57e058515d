import logging
import sys
from typing import Optional

DEFAULT_FORMAT = "%(name)s - %(levelname)s - %(message)s"


class _MaxLevelFilter(logging.Filter):
    """Pass only records at or below ``max_level``."""

    def __init__(self, max_level: int) -> None:
        super().__init__()
        self._max_level = max_level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno <= self._max_level


def _stream_handler(stream, formatter: logging.Formatter, min_level: int, max_level: Optional[int] = None):
    handler = logging.StreamHandler(stream=stream)
    handler.setLevel(min_level)
    handler.setFormatter(formatter)
    if max_level is not None:
        handler.addFilter(_MaxLevelFilter(max_level))
    return handler


def configure_split_stream_logging(
    *,
    level: int = logging.INFO,
    stderr_level: int = logging.WARNING,
    formatter: Optional[logging.Formatter] = None,
    logger_name: str = "",
) -> logging.Logger:
    """Route engine log records to stdout or stderr by level.

    Records below ``stderr_level`` go to stdout and the rest to stderr, so
    problems found while processing a batch stay visible when stdout is
    redirected into a report file. Existing handlers on the logger are replaced.
    """
    target = logging.getLogger(logger_name)
    target.handlers.clear()
    target.setLevel(level)

    fmt = formatter or logging.Formatter(DEFAULT_FORMAT)
    threshold = max(stderr_level, logging.DEBUG)
    target.addHandler(_stream_handler(sys.stdout, fmt, logging.DEBUG, threshold - 1))
    target.addHandler(_stream_handler(sys.stderr, fmt, threshold))
    return target
