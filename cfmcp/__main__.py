"""Allow ``python -m cfmcp`` to invoke the command-line interface."""

from cfmcp.interfaces.cli import cli

if __name__ == "__main__":
    cli()
