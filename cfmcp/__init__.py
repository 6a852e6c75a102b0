"""
cfmcp package initializer.

This package installs the Cloudflare MCP server into the MCP configuration of
the desktop clients found on this machine (Cline, Claude Desktop, Windsurf and
Cursor).

The package exposes a ``__version__`` attribute indicating the installed
version of cfmcp, read from the distribution metadata declared in
pyproject.toml.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("cfmcp")
except PackageNotFoundError:
    # Running from a source checkout without ``pip install -e .``
    __version__ = "0.0.0.dev"

__all__: list[str] = ["__version__"]
