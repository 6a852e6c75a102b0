"""Run the interactive ``wrangler login`` flow."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from typing import Sequence

from cfmcp.infrastructure.observability import get_logger

_logger = get_logger(__name__)


@dataclass(frozen=True)
class LoginResult:
    """Outcome of one login attempt."""

    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def run_login(command: Sequence[str]) -> LoginResult:
    """Run *command* and wait for it to exit.

    No timeout is applied: the user completes the login in a browser and
    the setup blocks until the command exits. A command that cannot be
    started is reported like a failed login.
    """
    _logger.info("Running '%s'", " ".join(command))
    try:
        completed = subprocess.run(
            list(command), capture_output=True, text=True, check=False
        )
    except OSError as exc:
        _logger.warning("Could not start '%s': %s", command[0], exc)
        return LoginResult(returncode=127, stderr=str(exc))
    return LoginResult(
        returncode=completed.returncode,
        stdout=completed.stdout or "",
        stderr=completed.stderr or "",
    )
