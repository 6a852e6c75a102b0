"""Adapter that starts the Cloudflare MCP server process."""

from .launcher import launch_server

__all__ = ["launch_server"]
