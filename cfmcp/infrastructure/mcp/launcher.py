"""Start the Cloudflare MCP server for one account.

MCP clients speak to the server over stdin and stdout, so the child process
inherits both and nothing is captured here.
"""

from __future__ import annotations

import shutil
import subprocess
from typing import Sequence

from cfmcp.infrastructure.observability import get_logger

_logger = get_logger(__name__)


def launch_server(command: Sequence[str], account_id: str) -> int:
    """Run ``<command> run <account_id>`` and return its exit status.

    The executable is looked up on ``PATH`` first so that wrappers such as
    ``npx.cmd`` are found on Windows. A command that cannot be started
    returns 127.
    """
    argv = list(command) + ["run", account_id]
    argv[0] = shutil.which(argv[0]) or argv[0]
    _logger.info("Starting MCP server: %s", " ".join(argv))
    try:
        completed = subprocess.run(argv, check=False)
    except OSError as exc:
        _logger.error("Could not start '%s': %s", command[0], exc)
        return 127
    return completed.returncode
