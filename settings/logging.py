"""Logging configuration."""

import sys
from pathlib import Path

from loguru import logger

from settings import LOG_DIR, LOG_LEVEL, LOG_TO_FILE

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <7}</level> | "
    "<cyan>{name}</cyan> | <level>{message}</level>"
)


def setup_logging(level: str = LOG_LEVEL, log_dir: Path | None = None) -> list[int]:
    """Route loguru output to stderr and, optionally, a daily JSON-lines file.

    The file sink is added when ``log_dir`` is given or ``OSU_LOG_TO_FILE``
    is set. Tracebacks never include local variable values. Returns the
    sink ids.
    """
    if log_dir is None and LOG_TO_FILE:
        log_dir = LOG_DIR

    logger.remove()
    sinks = [logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level.upper(), diagnose=False)]

    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        sinks.append(
            logger.add(
                log_dir / "osu_analytics_{time:YYYY-MM-DD}.jsonl",
                level="DEBUG",
                serialize=True,
                diagnose=False,
                rotation="00:00",
                retention="7 days",
                compression="gz",
            )
        )

    logger.debug("Logging configured: level={}, file={}", level.upper(), log_dir)
    return sinks
