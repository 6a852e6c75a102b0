"""Adapters around the Wrangler CLI and the credentials it stores."""

from .auth import (
    AuthTokensUnavailable,
    TokenSet,
    WranglerAuth,
)
from .login import LoginResult, run_login

__all__ = [
    "AuthTokensUnavailable",
    "LoginResult",
    "TokenSet",
    "WranglerAuth",
    "run_login",
]
