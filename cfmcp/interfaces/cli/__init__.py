"""CLI interface for cfmcp.

This package is the home of all Click commands; ``cli`` is the group
installed as the ``cfmcp`` console script.
"""

from .__main__ import cli
from .init import init
from .run import run

__all__ = ["cli", "init", "run"]
