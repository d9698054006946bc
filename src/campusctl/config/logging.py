"""Log setup: structlog in front, stdlib ``logging`` underneath.

Library modules log with ``logging.getLogger(__name__)``; structlog's
ProcessorFormatter renders those records and structlog's own events the
same way. Everything goes to stderr so stdout stays reserved for results.

``--log-json`` switches the console renderer for JSON lines. Only the
``campusctl`` logger tree drops to DEBUG under ``--verbose``; third-party
loggers (networkx, pydantic) stay at WARNING.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import structlog

PACKAGE_LOGGER = "campusctl"


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer(log_json: bool) -> structlog.types.Processor:
    if log_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    document: Path | None = None,
) -> None:
    """Install the stderr handler and structlog pipeline.

    Safe to call repeatedly; each call replaces the previous handler.

    Args:
        verbose: ``campusctl.*`` loggers emit DEBUG instead of WARNING.
        log_json: Render JSON lines instead of the console format.
        document: Campus document path bound to every event as ``document``.
    """
    shared = _shared_processors()
    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_json),
            ],
        )
    )
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.WARNING)
    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG if verbose else logging.WARNING)

    structlog.contextvars.clear_contextvars()
    if document is not None:
        structlog.contextvars.bind_contextvars(document=str(document))
