"""HTTP adapters for the Cloudflare API."""

from .client import CloudflareApiError, CloudflareHttpClient

__all__ = [
    "CloudflareApiError",
    "CloudflareHttpClient",
]
