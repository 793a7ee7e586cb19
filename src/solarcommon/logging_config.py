"""Loguru logging configuration.

The library itself only emits records through ``loguru.logger``. An
application embedding it calls ``setup_logging()`` once at startup to:
- configure the loguru stderr sink (coloured text or JSON)
- intercept all stdlib ``logging`` records and route them through loguru.
"""

from __future__ import annotations

import logging
import sys

from loguru import logger

from solarcommon.config import get_settings


def _loguru_level(record: logging.LogRecord) -> str | int:
    try:
        return logger.level(record.levelname).name
    except ValueError:
        # custom stdlib level with no loguru counterpart
        return record.levelno


def _caller_depth() -> int:
    # depth counted from emit(); skip frames inside the logging module
    frame, depth = sys._getframe(2), 1
    while frame is not None and frame.f_code.co_filename == logging.__file__:
        frame = frame.f_back
        depth += 1
    return depth


class InterceptHandler(logging.Handler):
    """Forward stdlib ``logging`` records to loguru.

    The originating stdlib logger name is kept in ``extra["logger_name"]``.
    """

    def emit(self, record: logging.LogRecord) -> None:
        logger.bind(logger_name=record.name).opt(
            depth=_caller_depth(), exception=record.exc_info
        ).log(_loguru_level(record), record.getMessage())


def setup_logging(*, level: str | None = None, json: bool | None = None) -> None:
    """Configure loguru as the single logging backend.

    Args:
        level: Minimum log level (DEBUG, INFO, WARNING, ...). Defaults to
            ``Settings.log_level``.
        json: If True, emit structured JSON to stderr. Defaults to
            ``Settings.log_json``.
    """
    settings = get_settings()
    level = (level or settings.log_level).upper()
    json = settings.log_json if json is None else json

    logger.remove()

    if json:
        logger.add(sys.stderr, level=level, serialize=True)
    else:
        logger.add(
            sys.stderr,
            level=level,
            format=(
                "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
                "<level>{level: <8}</level> | "
                "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
                "<level>{message}</level>"
            ),
            colorize=True,
        )

    # Root logger catches anything emitted through stdlib logging
    logging.root.handlers = [InterceptHandler()]
    logging.root.setLevel(logging.DEBUG)
