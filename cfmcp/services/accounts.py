"""Pick the Cloudflare account the MCP server will operate on."""

from __future__ import annotations

from typing import Sequence

from cfmcp.domain.models import AccountRef
from cfmcp.infrastructure.http import CloudflareApiError, CloudflareHttpClient
from cfmcp.infrastructure.observability import get_logger
from cfmcp.services.errors import (
    AccountAccessDeniedError,
    AccountFetchError,
    AmbiguousAccountError,
    NoAccountsError,
    UnknownAccountError,
)

_logger = get_logger(__name__)


def fetch_accounts(client: CloudflareHttpClient) -> list[AccountRef]:
    """Fetch the accessible accounts, treating any API failure as fatal."""
    try:
        return client.fetch_accounts()
    except CloudflareApiError as exc:
        raise AccountFetchError(str(exc), remediation=exc.remediation) from exc


def resolve_account(accounts: Sequence[AccountRef], hint: str | None = None) -> str:
    """Return the id of the account to use.

    With a single account, *hint* may only repeat that account's id. With
    several accounts a hint is required and must name one of them.
    """
    hint = hint or None
    if not accounts:
        raise NoAccountsError("No accounts found.")

    if len(accounts) == 1:
        only = accounts[0]
        if hint is not None and hint != only.id:
            raise AccountAccessDeniedError(
                f"You don't have access to account {hint}. "
                f"Leave blank to use {only.id}.",
                remediation=f"Run 'cfmcp init' without an account id to use {only.id}.",
            )
        _logger.info("Using account: %s", only.id)
        return only.id

    if hint is None:
        raise AmbiguousAccountError("Multiple accounts found.", list(accounts))
    if not any(account.id == hint for account in accounts):
        raise UnknownAccountError(
            f"Account {hint} is not among your accounts.", list(accounts)
        )
    _logger.info("Using account: %s", hint)
    return hint
