"""CLI helpers for constructing the Wrangler and Cloudflare API adapters."""

from __future__ import annotations

from requests import Session

from cfmcp.app.config import SetupSettings
from cfmcp.infrastructure.http import CloudflareHttpClient
from cfmcp.infrastructure.wrangler import WranglerAuth


def build_wrangler_auth(
    settings: SetupSettings, *, session: Session | None = None
) -> WranglerAuth:
    """Return a :class:`WranglerAuth` reading the configured credentials file."""

    return WranglerAuth(
        settings.wrangler_config_path,
        api_token=settings.api_token,
        session=session,
    )


def build_api_client(
    settings: SetupSettings, access_token: str, *, session: Session | None = None
) -> CloudflareHttpClient:
    """Return a Cloudflare API client authenticated with *access_token*."""

    return CloudflareHttpClient(
        api_token=access_token,
        base_url=settings.api_base_url,
        session=session,
    )
