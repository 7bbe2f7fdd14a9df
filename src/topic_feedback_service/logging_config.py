"""Structured logging for the topic feedback service.

Every module logs through structlog with dotted event names and key/value
context, e.g.:

    logger = get_logger(__name__)
    logger.info("topic_selector.enriched.selected", documents=["A", "B"], topics=[134])

configure_logging() is called once from main.py. Until then structlog's
defaults apply, which is what unit tests run with.
"""

import logging
import sys
from typing import Any

import structlog

# Libraries whose INFO output is per-statement noise
NOISY_LOGGERS = ("sqlalchemy.engine", "sqlalchemy.pool", "httpx", "httpcore")


def configure_logging(
    log_level: str = "INFO",
    json_logs: bool = False,
    library_log_level: str = "WARNING",
) -> None:
    """Route structlog through stdlib logging on stdout.

    Args:
        log_level: Level for application loggers
        json_logs: Render one JSON object per line instead of console text
        library_log_level: Level for SQLAlchemy and httpx loggers
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=_level(log_level),
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(_level(library_log_level))

    renderer: Any
    if json_logs:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=sys.stdout.isatty(),
            exception_formatter=structlog.dev.plain_traceback,
        )

    structlog.configure(
        processors=[*_shared_processors(json_logs), renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:
    """Return a structlog logger bound to a module name.

    Typed as Any; the concrete type is structlog.stdlib.BoundLogger once
    configure_logging() has run.
    """
    return structlog.get_logger(name)


def _shared_processors(json_logs: bool) -> list[Any]:
    processors: list[Any] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.MODULE,
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            ]
        ),
    ]
    if json_logs:
        # ConsoleRenderer formats tracebacks itself
        processors.append(structlog.processors.format_exc_info)
    return processors


def _level(name: str) -> int:
    return getattr(logging, name.upper(), logging.INFO)
