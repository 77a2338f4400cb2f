"""Logging configuration for the command-line tool.

Library modules log through stdlib `logging.getLogger(__name__)` and never
install handlers. The CLI calls `setup_logging()` once to route those records
through structlog's console renderer on stderr.
"""

from __future__ import annotations

import logging
import sys

import structlog

HANDLER_NAME = "rootfinder-console"


def setup_logging(verbose: bool = False) -> None:
    """Configure the root logger with a structlog console handler on stderr.

    Args:
        verbose: If True, show DEBUG messages (which resolution case applied,
            skipped directories). If False (default), show INFO and above.
    """
    root = logging.getLogger()
    # Replace only our own handler so repeated calls don't stack output.
    for existing in list(root.handlers):
        if existing.get_name() == HANDLER_NAME:
            root.removeHandler(existing)
    root.setLevel(logging.DEBUG if verbose else logging.INFO)

    shared_processors = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=[*shared_processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processor=structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        )
    )
    root.addHandler(handler)
