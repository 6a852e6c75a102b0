"""Logging setup for cfmcp.

Everything the setup command reports goes through the standard library
logger hierarchy rooted at ``cfmcp``. The CLI calls :func:`configure_logging`
once; services and adapters only ever call :func:`get_logger`.
"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Iterator

# ---------------------------------------------------------------------------
# Context fields
# ---------------------------------------------------------------------------

_log_context: ContextVar[dict[str, Any]] = ContextVar("log_context", default={})


class ContextualFormatter(logging.Formatter):
    """Formatter that appends the active context fields to each message."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        ctx = _log_context.get()
        if ctx:
            ctx_str = " ".join(f"{k}={v}" for k, v in ctx.items())
            message = f"{message} [{ctx_str}]"
        return message


@contextmanager
def log_context(**fields: Any) -> Iterator[None]:
    """Attach fields such as ``target=cursor`` to every message in the block.

    Nested blocks merge their fields with the enclosing ones; the previous
    context is restored on exit.
    """
    merged = {**_log_context.get(), **fields}
    token = _log_context.set(merged)
    try:
        yield
    finally:
        _log_context.reset(token)


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"
NOISY_LOGGERS = ("urllib3", "requests", "charset_normalizer")


class StderrHandler(logging.StreamHandler):
    """Stream handler bound to whatever ``sys.stderr`` is at emit time."""

    def __init__(self) -> None:
        super().__init__()

    @property
    def stream(self):
        return sys.stderr

    @stream.setter
    def stream(self, _value) -> None:
        pass


_handler: StderrHandler | None = None


def configure_logging(
    level: int = logging.INFO,
    third_party_level: int = logging.WARNING,
) -> None:
    """Route log records to stderr with the contextual formatter.

    Args:
        level: Level for the ``cfmcp`` loggers.
        third_party_level: Level applied to the HTTP stack's loggers.
    """
    global _handler

    root = logging.getLogger("cfmcp")
    root.setLevel(level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(third_party_level)

    if _handler is not None:
        return

    _handler = StderrHandler()
    _handler.setFormatter(ContextualFormatter(LOG_FORMAT))
    root.addHandler(_handler)


def get_logger(name: str) -> logging.Logger:
    """Return the logger for *name* (normally ``__name__``)."""
    return logging.getLogger(name)


def log_exception(
    logger: logging.Logger,
    message: str,
    exc: BaseException,
    **context: Any,
) -> None:
    """Log *exc* with traceback under the given context fields."""
    with log_context(**context):
        logger.exception("%s: %s", message, exc)
