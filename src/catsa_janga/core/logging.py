# src/catsa_janga/core/logging.py
"""Structured logging for catsa-janga.

Library code only asks for a logger via get_logger(). Output is set up by
an entry point (the CLI, or the host application) calling
configure_logging().

Output goes to stderr so that stdout stays free for program output such as
``catsa-janga show``. Stdlib records share the structlog renderer, which
matters for asyncio: "Task exception was never retrieved" arrives through
the ``asyncio`` stdlib logger right before the shutdown coordinator logs
its own crash event.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.stdlib import ProcessorFormatter

from catsa_janga.core.config import LoggingSettings


class _CatsaHandler(logging.StreamHandler):
    """Root handler owned by configure_logging(); other root handlers are left alone."""


def configure_logging(settings: LoggingSettings | None = None) -> None:
    """Route structlog and stdlib logging through one renderer on stderr.

    Calling it again replaces the handler installed by the previous call.

    Args:
        settings: Level and output format (default: INFO, console)
    """
    if settings is None:
        settings = LoggingSettings()

    pre_chain: list[Any] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        # asyncio and other stdlib loggers use %-style arguments
        structlog.stdlib.PositionalArgumentsFormatter(),
    ]

    renderer: Any
    if settings.json_output:
        renderer = structlog.processors.JSONRenderer()
        pre_chain.append(structlog.processors.format_exc_info)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[*pre_chain, ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    handler = _CatsaHandler(sys.stderr)
    handler.setFormatter(
        ProcessorFormatter(
            processors=[ProcessorFormatter.remove_processors_meta, renderer],
            foreign_pre_chain=pre_chain,
        )
    )

    root = logging.getLogger()
    for existing in [h for h in root.handlers if isinstance(h, _CatsaHandler)]:
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(settings.level)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a bound logger for a module (typically ``__name__``)."""
    logger: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return logger
