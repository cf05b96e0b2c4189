"""Logging utilities tailored for word-clock grid builds."""

from __future__ import annotations

import logging
from typing import Optional, TextIO, Union

PACKAGE_LOGGER = "wordclock"


def resolve_level(level: Union[int, str]) -> int:
    """Accept a numeric level or a name such as ``"debug"``; unknown names mean INFO."""

    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(level: Union[int, str] = logging.INFO, stream: Optional[TextIO] = None) -> None:
    """Configure the package logger with a sensible formatter.

    Only the ``wordclock`` logger is touched, so an application embedding the
    builder keeps its own root handlers. Every stage logs its totals at INFO
    and each placement decision at DEBUG.
    """

    handler = logging.StreamHandler(stream)
    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
        datefmt="%H:%M:%S",
    )
    handler.setFormatter(formatter)

    package = logging.getLogger(PACKAGE_LOGGER)
    package.handlers.clear()
    package.addHandler(handler)
    package.setLevel(resolve_level(level))
    package.propagate = False


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a namespaced logger, configuring defaults if needed."""

    if not logging.getLogger(PACKAGE_LOGGER).handlers:
        configure_logging()
    return logging.getLogger(name or PACKAGE_LOGGER)
