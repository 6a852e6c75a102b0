"""Service layer for the setup workflow."""

from .accounts import fetch_accounts, resolve_account
from .auth import AuthService
from .client_config import (
    ConfigureResult,
    ConfigureStatus,
    configure_clients,
    merge_config,
)
from .errors import SetupError
from .setup import SetupReport, SetupService, resolve_runtime

__all__ = [
    "AuthService",
    "ConfigureResult",
    "ConfigureStatus",
    "SetupError",
    "SetupReport",
    "SetupService",
    "configure_clients",
    "fetch_accounts",
    "merge_config",
    "resolve_account",
    "resolve_runtime",
]
