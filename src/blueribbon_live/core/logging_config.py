"""Structured logging configuration using structlog.

``configure_logging()`` is called by the application factory.  Modules log
through structlog directly::

    import structlog
    logger = structlog.get_logger(__name__)
    logger.info("streams_fetched", count=12)

Plain ``logging.getLogger(__name__)`` records (uvicorn, httpx) are routed
through the same processor chain so every line shares one format.

The request-logging middleware in ``api/main.py`` sets ``request_id_var``
and every record emitted while handling that request carries the ID.
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar

import structlog
from structlog.types import EventDict, WrappedLogger

request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)
"""Per-request ID propagated from the HTTP middleware to log processors."""


_SECRET_SUBSTRINGS: frozenset[str] = frozenset({
    "secret",
    "token",
    "authorization",
    "bearer",
    "password",
})
"""Lower-cased substrings identifying event-dict keys whose values are redacted."""

_REDACTED = "[REDACTED]"


def _is_secret_key(key: str) -> bool:
    key_lower = key.lower()
    return any(secret in key_lower for secret in _SECRET_SUBSTRINGS)


def _redact_secrets(
    logger: WrappedLogger,  # noqa: ARG001
    method_name: str,  # noqa: ARG001
    event_dict: EventDict,
) -> EventDict:
    """Replace values of secret-bearing keys with ``"[REDACTED]"``.

    Top-level keys and the keys of nested dicts one level deep (e.g. a
    ``headers={...}`` field) are checked case-insensitively.
    """
    for key in list(event_dict.keys()):
        if _is_secret_key(key):
            event_dict[key] = _REDACTED
            continue
        val = event_dict[key]
        if isinstance(val, dict):
            event_dict[key] = {
                k: (_REDACTED if _is_secret_key(str(k)) else v) for k, v in val.items()
            }
    return event_dict


def _inject_request_id(
    logger: WrappedLogger,  # noqa: ARG001
    method_name: str,  # noqa: ARG001
    event_dict: EventDict,
) -> EventDict:
    """Add ``request_id`` from the context variable when one is set."""
    rid = request_id_var.get()
    if rid is not None and "request_id" not in event_dict:
        event_dict["request_id"] = rid
    return event_dict


# Library loggers that only speak above WARNING unless the app runs at DEBUG.
_CHATTY_LOGGERS: tuple[str, ...] = ("uvicorn.access", "httpx", "httpcore")

# Applied to both structlog events and stdlib records.  ``merge_contextvars``
# picks up the method/path bound by the request middleware.
_PRE_CHAIN: tuple[structlog.types.Processor, ...] = (
    structlog.contextvars.merge_contextvars,
    _inject_request_id,
    _redact_secrets,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.format_exc_info,
)


def _stdout_handler(renderer: structlog.types.Processor) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=list(_PRE_CHAIN),
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )
    return handler


def configure_logging(log_level: str = "INFO") -> None:
    """Route structlog and stdlib logging through one stdout handler.

    Records are newline-delimited JSON with ``timestamp``, ``level``,
    ``logger`` and ``event`` keys.  ``DEBUG`` switches to the coloured
    console renderer and lets the HTTP client loggers through.

    Safe to call repeatedly; the root logger ends up with exactly one handler.
    """
    level_name = log_level.upper()
    debug = level_name == "DEBUG"
    renderer = (
        structlog.dev.ConsoleRenderer(colors=True)
        if debug
        else structlog.processors.JSONRenderer()
    )

    root = logging.getLogger()
    root.handlers[:] = [_stdout_handler(renderer)]
    root.setLevel(getattr(logging, level_name, logging.INFO))

    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.NOTSET if debug else logging.WARNING)

    structlog.configure(
        processors=[*_PRE_CHAIN, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )
