"""Package-local logging utilities.

This package is a library first. Its loguru records are disabled unless the
host application enables them. CLI users can opt into logs via
``OAVALIDATOR_LOG_LEVEL``.
"""

from __future__ import annotations

import os
import sys

from loguru import logger

LOGGER_NAME = "oavalidator"
LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {name} | {message}"

logger.disable(LOGGER_NAME)

_handler_id: int | None = None


def _resolve_level(raw_level: str) -> str:
    try:
        logger.level(raw_level)
    except ValueError:
        return "INFO"
    return raw_level


def configure_logging(level: str | None = None) -> None:
    """Configure package logging for CLI/runtime diagnostics.

    This is intentionally opt-in. If neither ``level`` nor
    ``OAVALIDATOR_LOG_LEVEL`` is provided, package records stay disabled.
    """
    global _handler_id

    env_level = os.getenv("OAVALIDATOR_LOG_LEVEL", "")
    raw_level = level if level is not None else (env_level or "")
    resolved_level = raw_level.strip().upper()

    # Always drop our previous sink to avoid stale stderr streams across repeated CLI calls.
    if _handler_id is not None:
        logger.remove(_handler_id)
        _handler_id = None

    if not resolved_level:
        logger.disable(LOGGER_NAME)
        return

    _handler_id = logger.add(
        sys.stderr,
        level=_resolve_level(resolved_level),
        format=LOG_FORMAT,
        filter=LOGGER_NAME,
    )
    logger.enable(LOGGER_NAME)


__all__ = ["LOGGER_NAME", "configure_logging", "logger"]
