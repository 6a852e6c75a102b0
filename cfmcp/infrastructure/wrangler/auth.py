"""Wrangler OAuth credentials stored on the local machine.

``wrangler login`` writes an OAuth access token, its expiry and a refresh
token into ``<wrangler dir>/config/default.toml``. This module reads that
file, tells whether the access token has expired and exchanges the refresh
token for a new access token, persisting the result the same way Wrangler
does.
"""

from __future__ import annotations

import json
import tomllib
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import requests
from requests import Session

from cfmcp.infrastructure.observability import get_logger

# Public OAuth client id of the Wrangler CLI.
WRANGLER_CLIENT_ID = "54d11594-84e4-41aa-b438-e81b8fa78ee7"
TOKEN_URL = "https://dash.cloudflare.com/oauth2/token"

_logger = get_logger(__name__)


class AuthTokensUnavailable(Exception):
    """Raised when no usable Wrangler credentials are stored locally."""


@dataclass
class TokenSet:
    """Credentials for calling the Cloudflare API."""

    access_token: str
    refresh_token: str | None = None
    expiration_time: datetime | None = None
    scopes: list[str] = field(default_factory=list)
    from_environment: bool = False

    def is_expired(self, now: datetime | None = None) -> bool:
        if self.from_environment or self.expiration_time is None:
            return False
        return (now or datetime.now(timezone.utc)) >= self.expiration_time


def _parse_expiration(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(str(value))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _format_expiration(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace(
        "+00:00", "Z"
    )


def _toml_value(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, (list, tuple)):
        return "[ " + ", ".join(_toml_value(v) for v in value) + " ]"
    return json.dumps(value)


def render_tokens(tokens: TokenSet) -> str:
    """Serialize *tokens* in the layout Wrangler uses for ``default.toml``."""
    values: dict[str, object] = {"oauth_token": tokens.access_token}
    if tokens.expiration_time is not None:
        values["expiration_time"] = _format_expiration(tokens.expiration_time)
    if tokens.refresh_token:
        values["refresh_token"] = tokens.refresh_token
    if tokens.scopes:
        values["scopes"] = tokens.scopes
    return "".join(f"{key} = {_toml_value(value)}\n" for key, value in values.items())


class WranglerAuth:
    """Read and refresh the credentials left behind by ``wrangler login``.

    When *api_token* is given (``CLOUDFLARE_API_TOKEN``) it is used as-is and
    the config file is never consulted, mirroring Wrangler itself.
    """

    def __init__(
        self,
        config_path: Path,
        *,
        api_token: str | None = None,
        token_url: str = TOKEN_URL,
        client_id: str = WRANGLER_CLIENT_ID,
        session: Session | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.config_path = config_path
        self.api_token = api_token
        self.token_url = token_url
        self.client_id = client_id
        self.session = session or requests.Session()
        self.timeout = timeout

    # -------------------- reading --------------------
    def get_auth_tokens(self) -> TokenSet:
        """Return the stored credentials.

        Raises:
            AuthTokensUnavailable: If the file is missing, unreadable, not
                valid TOML or lacks an ``oauth_token``.
        """
        if self.api_token:
            return TokenSet(access_token=self.api_token, from_environment=True)

        if not self.config_path.exists():
            raise AuthTokensUnavailable(
                f"No Wrangler credentials found at {self.config_path}"
            )
        try:
            with open(self.config_path, "rb") as f:
                payload = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as exc:
            raise AuthTokensUnavailable(
                f"Could not read Wrangler credentials from {self.config_path}: {exc}"
            ) from exc

        access_token = payload.get("oauth_token")
        if not access_token:
            raise AuthTokensUnavailable(
                f"No OAuth token in {self.config_path}; you may be logged out"
            )
        try:
            expiration = _parse_expiration(payload.get("expiration_time"))
        except ValueError as exc:
            raise AuthTokensUnavailable(
                f"Invalid expiration_time in {self.config_path}: {exc}"
            ) from exc
        return TokenSet(
            access_token=str(access_token),
            refresh_token=payload.get("refresh_token") or None,
            expiration_time=expiration,
            scopes=list(payload.get("scopes") or []),
        )

    def is_access_token_expired(self) -> bool:
        return self.get_auth_tokens().is_expired()

    # -------------------- refreshing --------------------
    def refresh_token(self) -> bool:
        """Exchange the stored refresh token for a new access token.

        Returns ``True`` when new credentials were obtained and written back
        to the config file, ``False`` on any failure.
        """
        try:
            current = self.get_auth_tokens()
        except AuthTokensUnavailable as exc:
            _logger.warning("Cannot refresh: %s", exc)
            return False
        if current.from_environment:
            return True
        if not current.refresh_token:
            _logger.warning("No refresh token stored in %s", self.config_path)
            return False

        data = {
            "grant_type": "refresh_token",
            "refresh_token": current.refresh_token,
            "client_id": self.client_id,
        }
        try:
            response = self.session.post(self.token_url, data=data, timeout=self.timeout)
        except requests.RequestException as exc:
            _logger.warning("Token refresh request failed: %s", exc)
            return False
        if response.status_code >= 400:
            _logger.warning(
                "Token refresh rejected with status %s: %s",
                response.status_code,
                response.text[:200],
            )
            return False
        try:
            body = response.json()
        except ValueError as exc:
            _logger.warning("Token refresh returned invalid JSON: %s", exc)
            return False
        if not isinstance(body, dict) or not body.get("access_token"):
            _logger.warning("Token refresh response did not include an access token")
            return False
        try:
            expires_in = int(body.get("expires_in", 3600))
        except (TypeError, ValueError):
            _logger.warning(
                "Token refresh returned an invalid expires_in: %r", body.get("expires_in")
            )
            return False

        refreshed = TokenSet(
            access_token=body["access_token"],
            refresh_token=body.get("refresh_token") or current.refresh_token,
            expiration_time=datetime.now(timezone.utc) + timedelta(seconds=expires_in),
            scopes=(body.get("scope") or "").split() or current.scopes,
        )
        try:
            self._store_tokens(refreshed)
        except OSError as exc:
            _logger.warning("Could not persist refreshed token: %s", exc)
            return False
        return True

    def _store_tokens(self, tokens: TokenSet) -> None:
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_path, "w", encoding="utf-8") as f:
            f.write(render_tokens(tokens))


__all__ = [
    "AuthTokensUnavailable",
    "TOKEN_URL",
    "TokenSet",
    "WRANGLER_CLIENT_ID",
    "WranglerAuth",
    "render_tokens",
]
