"""Centralized logging configuration using loguru.

Also provides the step timer the build uses to report how long each
stage took.

Example:
    from photo_portfolio.logging import setup_logging, timed

    setup_logging(level="DEBUG")

    timings = {}
    with timed("Image resizing", timings):
        ...

"""

import sys
import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from loguru import logger


def setup_logging(
    level: str = "INFO",
    json_output: bool = False,
    log_file: str | None = None,
) -> Any:
    """Configure loguru for the build tool.

    Should be called once, before any build step runs.

    Args:
        level: Minimum log level to capture. One of: DEBUG, INFO, WARNING, ERROR, CRITICAL.
        json_output: If True, serialize log records as JSON lines.
        log_file: Optional file path to write logs to. If None, logs only to stderr.

    Returns:
        The configured loguru logger instance.

    """
    logger.remove()

    console_format = (
        "<green>{time:HH:mm:ss}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan> - "
        "<level>{message}</level>"
    )

    if json_output:
        logger.add(sys.stderr, format="{message}", serialize=True, level=level)
    else:
        logger.add(sys.stderr, format=console_format, level=level, colorize=True)

    if log_file:
        logger.add(
            log_file,
            format=console_format,
            level=level,
            rotation="10 MB",
            retention="7 days",
            compression="gz",
        )

    return logger


@contextmanager
def timed(step: str, timings: dict[str, float]) -> Iterator[None]:
    """Log how long a build step takes and store it under its name.

    A step that raises is logged as failed and records no timing.

    Args:
        step: Human-readable step name, e.g. "HTML generation".
        timings: Mapping the elapsed seconds are written into.

    """
    logger.info("{} started", step)
    start = time.perf_counter()
    try:
        yield
    except Exception:
        logger.error("{} failed after {:.1f} seconds", step, time.perf_counter() - start)
        raise
    elapsed = time.perf_counter() - start
    timings[step] = elapsed
    logger.info("{} completed in {:.1f} seconds", step, elapsed)
