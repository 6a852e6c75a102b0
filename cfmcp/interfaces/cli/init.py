"""The ``init`` command: connect to Cloudflare and configure MCP clients."""

from __future__ import annotations

import json
import logging

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from cfmcp import __version__
from cfmcp.infrastructure.observability import configure_logging
from cfmcp.interfaces.cli.context import build_setup_service, resolve_settings
from cfmcp.services.errors import SetupError
from cfmcp.services.setup import SetupReport

console = Console()
err_console = Console(stderr=True)

PROJECT_URL = "https://github.com/GutMutCode/mcp-server-cloudflare"

_STATUS_STYLES = {
    "configured": "green",
    "skipped": "yellow",
    "failed": "red",
}


def _print_welcome() -> None:
    console.print(
        Panel.fit(
            f"Welcome to [yellow]cfmcp[/yellow] v{escape(__version__)}!\n"
            "This will make sure you're connected to the Cloudflare API and install\n"
            "the Cloudflare MCP server into Claude, Cline, Windsurf and Cursor.\n"
            f"For more information, visit [blue underline]{PROJECT_URL}[/blue underline]",
            title="cfmcp init",
        )
    )


def _print_report(report: SetupReport) -> None:
    table = Table(title=f"MCP clients (account {escape(report.account_id)})")
    table.add_column("Client", style="bold")
    table.add_column("Status")
    table.add_column("Details")
    for result in report.results:
        style = _STATUS_STYLES[result.status.value]
        details = result.reason or str(result.path)
        table.add_row(
            result.target.display_name,
            f"[{style}]{result.status.value}[/{style}]",
            escape(details),
        )
    console.print(table)

    if report.success_count > 0:
        console.print(
            f"[green]Successfully configured {report.success_count} client(s)![/green]"
        )
        console.print(
            "[blue]Try asking any configured client to \"tell me which Workers I have "
            "on my account\" to get started![/blue]"
        )
        return

    console.print(
        "[yellow]No clients were configured. You may need to configure them manually.[/yellow]"
    )
    console.print("Manual configuration example:")
    click.echo(json.dumps(report.manual_config, indent=2))


@click.command(name="init")
@click.argument("account_id", required=False)
@click.option(
    "--verbose/--quiet",
    default=True,
    show_default=True,
    help="Show progress messages while the setup runs.",
)
@click.option(
    "--json-output",
    is_flag=True,
    help="Print the final report as JSON instead of a table.",
)
@click.pass_context
def init(
    ctx: click.Context, account_id: str | None, verbose: bool, json_output: bool
) -> None:
    """Connect to Cloudflare and install the MCP server into local clients.

    ACCOUNT_ID selects the Cloudflare account when you have access to more
    than one.
    """
    configure_logging(logging.INFO if verbose else logging.WARNING)
    if not json_output:
        _print_welcome()

    try:
        settings = resolve_settings()
    except (OSError, ValueError) as exc:
        err_console.print(f"[red]Invalid configuration:[/red] {escape(str(exc))}")
        ctx.exit(1)

    try:
        report = build_setup_service(settings).run(account_id)
    except SetupError as exc:
        err_console.print(f"[red]Error:[/red] {escape(str(exc))}")
        if exc.remediation:
            err_console.print(f"[dim]{escape(exc.remediation)}[/dim]")
        ctx.exit(1)

    if json_output:
        click.echo(json.dumps(report.to_dict(), indent=2))
        return
    _print_report(report)
