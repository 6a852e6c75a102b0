from __future__ import annotations

from datetime import datetime, timezone

import pytest

from cfmcp.infrastructure.wrangler import AuthTokensUnavailable, LoginResult, TokenSet
from cfmcp.services.auth import AuthService
from cfmcp.services.errors import AuthUnavailableError, RefreshFailedError

VALID = TokenSet(access_token="valid")
EXPIRED = TokenSet(
    access_token="stale",
    refresh_token="r",
    expiration_time=datetime(2000, 1, 1, tzinfo=timezone.utc),
)


class FakeWrangler:
    """Returns (or raises) the queued values from successive reads."""

    def __init__(self, *reads, refresh_ok: bool = True) -> None:
        self.reads = list(reads)
        self.refresh_ok = refresh_ok
        self.refresh_calls = 0

    def get_auth_tokens(self) -> TokenSet:
        value = self.reads.pop(0) if len(self.reads) > 1 else self.reads[0]
        if isinstance(value, Exception):
            raise value
        return value

    def refresh_token(self) -> bool:
        self.refresh_calls += 1
        return self.refresh_ok


class RecordingLogin:
    def __init__(self, result: LoginResult | None = None) -> None:
        self.result = result or LoginResult(returncode=0)
        self.commands: list[list[str]] = []

    def __call__(self, command):
        self.commands.append(list(command))
        return self.result


def _service(wrangler, login) -> AuthService:
    return AuthService(wrangler, login_command=["wrangler", "login"], login_runner=login)


def test_existing_valid_credentials_skip_login() -> None:
    login = RecordingLogin()
    wrangler = FakeWrangler(VALID)

    assert _service(wrangler, login).ensure_auth() is VALID
    assert login.commands == []
    assert wrangler.refresh_calls == 0


def test_missing_credentials_trigger_single_login() -> None:
    login = RecordingLogin()
    wrangler = FakeWrangler(AuthTokensUnavailable("missing"), VALID)

    assert _service(wrangler, login).ensure_auth() is VALID
    assert login.commands == [["wrangler", "login"]]


def test_credentials_still_missing_after_login_fails_without_retrying() -> None:
    login = RecordingLogin(LoginResult(returncode=1, stderr="login aborted"))
    wrangler = FakeWrangler(AuthTokensUnavailable("missing"), AuthTokensUnavailable("still"))

    with pytest.raises(AuthUnavailableError) as exc_info:
        _service(wrangler, login).ensure_auth()

    assert len(login.commands) == 1
    assert isinstance(exc_info.value.__cause__, AuthTokensUnavailable)
    assert "wrangler@latest login" in exc_info.value.remediation


def test_expired_token_is_refreshed() -> None:
    wrangler = FakeWrangler(EXPIRED, VALID)

    assert _service(wrangler, RecordingLogin()).ensure_auth() is VALID
    assert wrangler.refresh_calls == 1


def test_failed_refresh_fails_fast() -> None:
    wrangler = FakeWrangler(EXPIRED, refresh_ok=False)

    with pytest.raises(RefreshFailedError, match="Failed to refresh"):
        _service(wrangler, RecordingLogin()).ensure_auth()
    assert wrangler.refresh_calls == 1
