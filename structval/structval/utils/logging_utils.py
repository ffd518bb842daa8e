import logging
import sys
from typing import Optional

# marks handlers installed here so a later call can replace them
_SPLIT_STREAM_ATTR = "_structval_split_stream"


class _BelowLevelFilter(logging.Filter):
    def __init__(self, level: int) -> None:
        super().__init__()
        self._level = level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self._level


def configure_split_stream_logging(
    logger_name: Optional[str] = None,
    *,
    level: int = logging.WARNING,
    stderr_level: int = logging.ERROR,
    formatter: Optional[logging.Formatter] = None,
) -> logging.Logger:
    """Route records of one logger to stdout or stderr by severity.

    Records below ``stderr_level`` share stdout with the checker report; the rest go to
    stderr.  Handlers from an earlier call are replaced, any other handler is kept.
    """
    logger = logging.getLogger(logger_name)
    for handler in [h for h in logger.handlers if getattr(h, _SPLIT_STREAM_ATTR, False)]:
        logger.removeHandler(handler)
    logger.setLevel(level)

    if formatter is None:
        formatter = logging.Formatter("%(name)s - %(levelname)s - %(message)s")
    stderr_level = max(stderr_level, logging.DEBUG)

    stdout_handler = logging.StreamHandler(stream=sys.stdout)
    stdout_handler.addFilter(_BelowLevelFilter(stderr_level))
    stderr_handler = logging.StreamHandler(stream=sys.stderr)
    stderr_handler.setLevel(stderr_level)

    for handler in (stdout_handler, stderr_handler):
        handler.setFormatter(formatter)
        setattr(handler, _SPLIT_STREAM_ATTR, True)
        logger.addHandler(handler)
    return logger
