"""Logging setup for applications that embed docbridge.

docbridge itself only emits events through ``structlog`` loggers named
``docbridge.*`` (decode failures at warning, encode/decode success at
debug, store lifecycle at info). Wiring those events to an output is left
to the embedding application; the helpers here do it in one call, routing
structlog through the standard library so docbridge events share handlers
with everything else the process logs.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.stdlib import LoggerFactory, add_logger_name

_RENDERERS = {
    "json": lambda: structlog.processors.JSONRenderer(),
    "console": lambda: structlog.dev.ConsoleRenderer(colors=True),
}


def _renderer(log_format: str) -> Any:
    try:
        return _RENDERERS[log_format]()
    except KeyError:
        raise ValueError(
            f"Unknown log format: {log_format} (expected one of {sorted(_RENDERERS)})"
        ) from None


def configure_logging(
    service_name: str,
    log_level: str = "INFO",
    log_format: str = "json",
) -> None:
    """Route docbridge events, and the application's own, to stdout.

    Parameters
    - service_name: Bound as ``service`` on every event
    - log_level: Standard level name, case-insensitive
    - log_format: ``json`` or ``console``

    Raises ``ValueError`` for an unknown level or format before anything is
    reconfigured.
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {log_level}")
    renderer = _renderer(log_format)

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            add_logger_name,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(service=service_name)


def configure_logging_from_config(service_name: str, config: Any) -> None:
    """Same as ``configure_logging``, with level and format from a ``BridgeConfig``."""
    configure_logging(service_name, config.log_level, config.log_format)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Logger for an application module, bound to the configured pipeline.

    Names under ``docbridge.`` are used by the library itself.
    """
    return structlog.get_logger(name)
