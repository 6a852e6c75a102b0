"""Entry point for the cfmcp command-line interface.

This module defines the top-level Click group. ``cfmcp init [ACCOUNT_ID]``
configures the local MCP clients; the entries it writes call back into
``python -m cfmcp run ACCOUNT_ID``.
"""

import click

from cfmcp import __version__

from .init import init
from .run import run


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, prog_name="cfmcp")
def cli() -> None:
    """Install the Cloudflare MCP server into local MCP clients."""


cli.add_command(init)
cli.add_command(run)


if __name__ == "__main__":
    cli()
