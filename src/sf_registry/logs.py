"""Structured logging setup.

Modules obtain loggers with ``structlog.get_logger(__name__)``; the CLI
calls :func:`configure_logging` once at start-up.  Diagnostic events go
to stderr through the stdlib handler while user-facing output stays on
the Rich console.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog


def configure_logging(*, verbose: bool = False, json_format: bool = False) -> None:
    """Configure structlog on top of the stdlib logging module.

    Parameters
    ----------
    verbose:
        Emit DEBUG events instead of WARNING and above.
    json_format:
        Render JSON lines instead of the console format.
    """
    processors: list[Any] = [
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=logging.DEBUG if verbose else logging.WARNING,
        force=True,
    )
