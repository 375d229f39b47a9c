# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""structlog setup for vitellary.

Events are rendered for the console on stderr, leaving stdout to command
output such as ``vitellary revisions``. Modules take their logger from
:func:`get_logger` at import time; the returned proxy resolves the
configuration on first use, so ``configure_logging`` can run afterwards.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, TextIO

import structlog

if TYPE_CHECKING:
    from vitellary.settings import Settings

__all__ = ["configure_logging", "get_logger"]


def _level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(settings: Settings | None = None, *, stream: TextIO | None = None) -> None:
    """Install the processor chain at ``settings.log_level``.

    Called once by the CLI. Unknown level names fall back to INFO.

    Args:
        settings: Settings instance (read from the environment if None)
        stream: where rendered events go (stderr if None)
    """
    if settings is None:
        from vitellary.settings import Settings

        settings = Settings()

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(_level(settings.log_level)),
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stderr),
    )


def get_logger(name: str | None = None) -> structlog.typing.FilteringBoundLogger:
    """Logger for a module; ``name`` shows up in the ``[logger]`` column."""
    if name is None:
        return structlog.get_logger()
    return structlog._config.BoundLoggerLazyProxy(None, initial_values={"logger": name})
