"""Observability facades."""

from .logging import configure_logging, get_logger, log_context, log_exception

__all__ = [
    "configure_logging",
    "get_logger",
    "log_context",
    "log_exception",
]
