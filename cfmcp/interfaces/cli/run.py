"""The ``run`` command named in every launch entry written by ``init``."""

from __future__ import annotations

import logging

import click
from rich.console import Console
from rich.markup import escape

from cfmcp.domain.models import RUN_COMMAND
from cfmcp.infrastructure.mcp import launch_server
from cfmcp.infrastructure.observability import configure_logging
from cfmcp.interfaces.cli.context import resolve_settings

err_console = Console(stderr=True)


@click.command(name=RUN_COMMAND)
@click.argument("account_id")
@click.pass_context
def run(ctx: click.Context, account_id: str) -> None:
    """Start the Cloudflare MCP server for ACCOUNT_ID.

    MCP clients invoke this over stdio. The server process is configured with
    CFMCP_SERVER_COMMAND or ``server_command`` in the CFMCP_CONFIG file.
    """
    configure_logging(logging.WARNING)
    try:
        settings = resolve_settings()
    except (OSError, ValueError) as exc:
        err_console.print(f"[red]Invalid configuration:[/red] {escape(str(exc))}")
        ctx.exit(1)

    ctx.exit(launch_server(settings.server_command, account_id))
