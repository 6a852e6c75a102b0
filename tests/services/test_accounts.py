import pytest

from cfmcp.domain.models import AccountRef
from cfmcp.infrastructure.http import CloudflareApiError
from cfmcp.services.accounts import fetch_accounts, resolve_account
from cfmcp.services.errors import (
    AccountAccessDeniedError,
    AccountFetchError,
    AmbiguousAccountError,
    NoAccountsError,
    UnknownAccountError,
)

ACME = AccountRef(id="abc", name="Acme")
OTHER = AccountRef(id="def", name="Other Co")


@pytest.mark.parametrize("hint", [None, "", "abc"])
def test_single_account_selected_without_or_with_matching_hint(hint) -> None:
    assert resolve_account([ACME], hint) == "abc"


def test_single_account_rejects_other_hint() -> None:
    with pytest.raises(AccountAccessDeniedError) as exc_info:
        resolve_account([ACME], "xyz")

    assert "xyz" in str(exc_info.value)
    assert "abc" in str(exc_info.value)


@pytest.mark.parametrize("hint", [None, "abc"])
def test_no_accounts_always_fails(hint) -> None:
    with pytest.raises(NoAccountsError):
        resolve_account([], hint)


def test_multiple_accounts_without_hint_lists_every_account() -> None:
    accounts = [ACME, OTHER, AccountRef(id="ghi", name="Third")]

    with pytest.raises(AmbiguousAccountError) as exc_info:
        resolve_account(accounts)

    message = str(exc_info.value)
    for account in accounts:
        assert account.id in message
        assert account.name in message
    assert exc_info.value.accounts == accounts
    assert "cfmcp init" in exc_info.value.remediation


def test_multiple_accounts_with_known_hint() -> None:
    assert resolve_account([ACME, OTHER], "def") == "def"


def test_multiple_accounts_with_unknown_hint_fails_fast() -> None:
    with pytest.raises(UnknownAccountError) as exc_info:
        resolve_account([ACME, OTHER], "zzz")

    assert "zzz" in str(exc_info.value)
    assert "Other Co" in str(exc_info.value)


def test_fetch_accounts_wraps_api_errors() -> None:
    class FailingClient:
        def fetch_accounts(self):
            raise CloudflareApiError("boom")

    with pytest.raises(AccountFetchError, match="boom") as exc_info:
        fetch_accounts(FailingClient())

    assert isinstance(exc_info.value.__cause__, CloudflareApiError)
