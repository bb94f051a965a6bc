"""Structlog setup shared by the tenancy services and the migration runners.

Probe events (member_role_changed, migration_item_failed, ...) go to stderr,
leaving stdout to the runners' rich summary. Output is colored for a
terminal and JSON lines otherwise.
"""

import logging
import os
import sys

import structlog


def configure_logging(level: int = logging.NOTSET) -> None:
    """Configure structlog for the current process.

    The migration runners pass logging.WARNING, or logging.DEBUG with
    --verbose, so routine probe events do not interleave with the console
    progress output.

    Args:
        level: Minimum stdlib log level to emit (NOTSET emits everything)
    """
    # FORCE_COLOR=1 keeps colors when stderr is piped (CI logs)
    force_color = os.environ.get("FORCE_COLOR", "").lower() in ("1", "true", "yes")
    use_colors = force_color or sys.stderr.isatty()

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if use_colors:
        renderers: list[structlog.types.Processor] = [
            structlog.dev.ConsoleRenderer(colors=True),
        ]
    else:
        renderers = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=[*shared_processors, *renderers],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )
