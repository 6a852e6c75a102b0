"""HTTP client for the Cloudflare REST API.

Only the account listing is needed during setup. The client wraps a
:class:`requests.Session`, sends the bearer token obtained from Wrangler and
unwraps Cloudflare's ``{"success": ..., "result": ..., "errors": ...}``
envelope, turning every transport or API failure into
:class:`CloudflareApiError`.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import urljoin

import requests
from pydantic import ValidationError
from requests import Response, Session

from cfmcp.domain.models import AccountRef
from cfmcp.infrastructure.observability import get_logger

DEFAULT_API_BASE_URL = "https://api.cloudflare.com/client/v4"

_logger = get_logger(__name__)


class CloudflareApiError(Exception):
    """Raised when a Cloudflare API call fails or returns an error envelope."""

    remediation = "Run 'npx wrangler@latest whoami' to check your login and network access."


class CloudflareHttpClient:
    """Bearer-authenticated access to the Cloudflare v4 API."""

    def __init__(
        self,
        *,
        api_token: str,
        base_url: str = DEFAULT_API_BASE_URL,
        session: Session | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_token = api_token
        self.session = session or requests.Session()
        self.timeout = timeout

    # -------------------- request helpers --------------------
    def _prepare_headers(self) -> dict[str, str]:
        from cfmcp import __version__

        return {
            "Authorization": f"Bearer {self.api_token}",
            "User-Agent": f"cfmcp/{__version__}",
        }

    def _url(self, path: str) -> str:
        return urljoin(self.base_url + "/", path.lstrip("/"))

    def _raise_for_status(self, response: Response) -> None:
        if response.status_code in (401, 403):
            raise CloudflareApiError(
                f"Cloudflare rejected the credentials (HTTP {response.status_code})."
            )
        if response.status_code >= 400:
            raise CloudflareApiError(
                f"Cloudflare API request failed with status {response.status_code}: "
                f"{response.text[:200]}"
            )

    def get_json(self, path: str, **params: Any) -> Any:
        """GET *path* and return the ``result`` member of the envelope."""
        url = self._url(path)
        _logger.debug("GET %s", url)
        try:
            response = self.session.get(
                url, headers=self._prepare_headers(), params=params or None,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise CloudflareApiError(f"Request to {url} failed: {exc}") from exc
        self._raise_for_status(response)

        try:
            body = response.json()
        except ValueError as exc:
            raise CloudflareApiError(f"Invalid JSON from {url}: {exc}") from exc
        if not isinstance(body, dict):
            raise CloudflareApiError(f"Unexpected response shape from {url}")
        if not body.get("success", False):
            errors = body.get("errors") or []
            detail = "; ".join(
                f"{e.get('code')}: {e.get('message')}" if isinstance(e, dict) else str(e)
                for e in errors
            ) or "unknown error"
            raise CloudflareApiError(f"Cloudflare API error for {url}: {detail}")
        return body.get("result")

    # -------------------- endpoints --------------------
    def fetch_accounts(self) -> list[AccountRef]:
        """Return the accounts the token has access to."""
        result = self.get_json("/accounts")
        if not isinstance(result, list):
            raise CloudflareApiError("Account listing did not return a list")
        try:
            accounts = [AccountRef.model_validate(item) for item in result]
        except ValidationError as exc:
            raise CloudflareApiError(f"Malformed account record: {exc}") from exc
        _logger.debug("Fetched %d account(s)", len(accounts))
        return accounts


__all__ = [
    "CloudflareApiError",
    "CloudflareHttpClient",
    "DEFAULT_API_BASE_URL",
]
