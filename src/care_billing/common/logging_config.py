"""Logging helpers for the billing services."""

from __future__ import annotations

import logging
from typing import Optional, Union

_LOGGER_PREFIX = "care_billing"
_DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the care_billing namespace."""
    return logging.getLogger(f"{_LOGGER_PREFIX}.{name}")


def configure_logging(level: Union[int, str] = "INFO", *, fmt: Optional[str] = None) -> None:
    """Attach a single stream handler to the package logger.

    Safe to call more than once; later calls only change the level.
    """
    root = logging.getLogger(_LOGGER_PREFIX)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    root.setLevel(level)
    if not any(getattr(h, "_care_billing", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt or _DEFAULT_FORMAT))
        handler._care_billing = True  # type: ignore[attr-defined]
        root.addHandler(handler)
