"""structlog configuration for planctl.

Every record, from structlog or stdlib ``logging``, ends up on stderr so
stdout stays machine-readable:
- Human (default): console renderer, colored on a TTY
- JSON (--log-json): one JSON object per line

Library modules log through ``logging.getLogger(__name__)``; the records
pick up the bound project name from :func:`bind_project`.
"""

from __future__ import annotations

import logging
import sys

import structlog

PACKAGE_LOGGER = "planctl"

_PRE_CHAIN: tuple[structlog.types.Processor, ...] = (
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.UnicodeDecoder(),
)


def _stderr_handler(log_json: bool) -> logging.Handler:
    if log_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=list(_PRE_CHAIN),
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )
    return handler


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Install a single stderr handler on the root logger.

    Calling it again replaces the previous handler, so one process can
    run several CLI invocations (as the test suite does).

    Args:
        verbose: Show DEBUG records from planctl. Otherwise WARNING and up.
        log_json: Use the JSON renderer instead of the console renderer.
    """
    structlog.configure(
        processors=[*_PRE_CHAIN, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(_stderr_handler(log_json))
    root_logger.setLevel(logging.WARNING)

    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG if verbose else logging.WARNING)


def bind_project(name: str | None) -> None:
    """Tag every following log record with the active project name."""
    structlog.contextvars.clear_contextvars()
    if name:
        structlog.contextvars.bind_contextvars(project=name)
