"""Make sure Wrangler credentials exist and are current."""

from __future__ import annotations

from typing import Callable, Sequence

from cfmcp.infrastructure.observability import get_logger
from cfmcp.infrastructure.wrangler import (
    AuthTokensUnavailable,
    LoginResult,
    TokenSet,
    WranglerAuth,
    run_login,
)
from cfmcp.services.errors import AuthUnavailableError, RefreshFailedError

LoginRunner = Callable[[Sequence[str]], LoginResult]

_logger = get_logger(__name__)


class AuthService:
    """Ensure usable credentials, logging in or refreshing at most once."""

    def __init__(
        self,
        wrangler: WranglerAuth,
        *,
        login_command: Sequence[str],
        login_runner: LoginRunner = run_login,
    ) -> None:
        self._wrangler = wrangler
        self._login_command = list(login_command)
        self._login_runner = login_runner

    def ensure_auth(self) -> TokenSet:
        """Return valid credentials.

        Missing or unreadable credentials trigger one interactive login
        followed by one more read. An expired access token is refreshed once.

        Raises:
            AuthUnavailableError: Credentials are still unavailable after login.
            RefreshFailedError: The expired access token could not be refreshed.
        """
        try:
            tokens = self._wrangler.get_auth_tokens()
        except AuthTokensUnavailable as exc:
            _logger.warning("%s", exc)
            tokens = self._login_and_reload()
        _logger.info("Wrangler auth info loaded")

        if tokens.is_expired():
            _logger.info("Access token expired, refreshing...")
            if not self._wrangler.refresh_token():
                raise RefreshFailedError("Failed to refresh access token")
            _logger.info("Successfully refreshed access token")
            tokens = self._wrangler.get_auth_tokens()
        return tokens

    def _login_and_reload(self) -> TokenSet:
        _logger.info("Running '%s' and retrying...", " ".join(self._login_command))
        result = self._login_runner(self._login_command)
        if result.stderr.strip():
            _logger.info("%s", result.stderr.strip())
        if not result.ok:
            _logger.warning("Login command exited with status %s", result.returncode)
        try:
            return self._wrangler.get_auth_tokens()
        except AuthTokensUnavailable as exc:
            raise AuthUnavailableError(
                f"Wrangler credentials are unavailable after login: {exc}"
            ) from exc
