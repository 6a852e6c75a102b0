"""Fatal setup errors.

Each error carries a ``remediation`` hint that the CLI prints below the
message. Per-client configuration problems are not errors; they are reported
as :class:`~cfmcp.services.client_config.ConfigureResult` values.
"""

from __future__ import annotations

from typing import Sequence

from cfmcp.domain.models import AccountRef

LOGIN_HINT = "Run 'npx wrangler@latest login' manually and retry."
WHOAMI_HINT = "Run 'npx wrangler@latest whoami' for more info."


def format_accounts(accounts: Sequence[AccountRef]) -> str:
    return "\n".join(f"  • {a.name} — {a.id}" for a in accounts)


class SetupError(Exception):
    """Base class for failures that abort the whole setup run."""

    remediation: str | None = None

    def __init__(self, message: str, *, remediation: str | None = None) -> None:
        super().__init__(message)
        if remediation is not None:
            self.remediation = remediation


class AuthUnavailableError(SetupError):
    """Credentials are still missing after running the login command."""

    remediation = LOGIN_HINT


class RefreshFailedError(SetupError):
    """The access token expired and could not be refreshed."""

    remediation = LOGIN_HINT


class AccountFetchError(SetupError):
    """The account list could not be retrieved from Cloudflare."""

    remediation = WHOAMI_HINT


class NoAccountsError(SetupError):
    """The authenticated user has no accessible accounts."""

    remediation = WHOAMI_HINT


class AccountAccessDeniedError(SetupError):
    """An account id was requested that differs from the only account available."""


class _AccountChoiceError(SetupError):
    """Base for errors that list the accounts the user could pick instead."""

    def __init__(self, message: str, accounts: Sequence[AccountRef]) -> None:
        self.accounts = list(accounts)
        super().__init__(
            f"{message}\nYou have access to:\n{format_accounts(self.accounts)}",
            remediation="Use 'cfmcp init <account_id>' to choose an account.",
        )


class AmbiguousAccountError(_AccountChoiceError):
    """Several accounts are available and none was requested."""


class UnknownAccountError(_AccountChoiceError):
    """The requested account id is not among the available accounts."""


class RuntimeNotFoundError(SetupError):
    """No Python interpreter was found on PATH for the launch entry."""


__all__ = [
    "AccountAccessDeniedError",
    "AccountFetchError",
    "AmbiguousAccountError",
    "AuthUnavailableError",
    "NoAccountsError",
    "RefreshFailedError",
    "RuntimeNotFoundError",
    "SetupError",
    "UnknownAccountError",
    "format_accounts",
]
