"""Run the three setup steps: authenticate, pick an account, configure clients."""

from __future__ import annotations

import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Mapping, Sequence

from cfmcp.domain.models import LaunchEntry, TargetApp, launch_entry_for
from cfmcp.infrastructure.http import CloudflareHttpClient
from cfmcp.infrastructure.observability import get_logger
from cfmcp.services.accounts import fetch_accounts, resolve_account
from cfmcp.services.auth import AuthService
from cfmcp.services.client_config import (
    ConfigureResult,
    ConfigureStatus,
    configure_clients,
    manual_config,
)
from cfmcp.services.errors import RuntimeNotFoundError

Which = Callable[[str], str | None]
ClientFactory = Callable[[str], CloudflareHttpClient]

_logger = get_logger(__name__)


def resolve_runtime(names: Sequence[str], which: Which = shutil.which) -> str:
    """Absolute path of the first interpreter in *names* found on PATH."""
    for name in names:
        found = which(name)
        if found:
            return os.path.abspath(found.strip())
    raise RuntimeNotFoundError(
        f"Could not find {' or '.join(names)} on PATH.",
        remediation="Install Python 3 or set CFMCP_PYTHON to its full path.",
    )


@dataclass(frozen=True)
class SetupReport:
    """Summary of a completed setup run."""

    account_id: str
    results: list[ConfigureResult]
    manual_config: dict[str, Any] = field(default_factory=dict)

    @property
    def success_count(self) -> int:
        return sum(1 for r in self.results if r.ok)

    def with_status(self, status: ConfigureStatus) -> list[ConfigureResult]:
        return [r for r in self.results if r.status is status]

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "account_id": self.account_id,
            "configured": self.success_count,
            "clients": [r.to_dict() for r in self.results],
        }
        if self.success_count == 0:
            payload["manual_config"] = self.manual_config
        return payload


class SetupService:
    """Coordinate authentication, account selection and client configuration.

    Collaborators are injected so that the whole flow can run against a fake
    home directory, a fake Cloudflare API and a fake login command.
    """

    def __init__(
        self,
        *,
        auth_service: AuthService,
        client_factory: ClientFactory,
        client_paths: Mapping[TargetApp, Path],
        python_names: Sequence[str] = ("python3", "python"),
        which: Which = shutil.which,
    ) -> None:
        self._auth_service = auth_service
        self._client_factory = client_factory
        self._client_paths = dict(client_paths)
        self._python_names = tuple(python_names)
        self._which = which

    def build_entries(self, account_id: str) -> dict[TargetApp, LaunchEntry]:
        command = resolve_runtime(self._python_names, self._which)
        return {
            target: launch_entry_for(target, command, account_id) for target in TargetApp
        }

    def run(self, account_hint: str | None = None) -> SetupReport:
        """Run all steps; fatal failures propagate as :class:`SetupError`."""
        _logger.info("Step 1 of 3: checking for existing Wrangler auth info")
        tokens = self._auth_service.ensure_auth()

        _logger.info("Step 2 of 3: fetching account info")
        accounts = fetch_accounts(self._client_factory(tokens.access_token))
        account_id = resolve_account(accounts, account_hint)

        _logger.info("Step 3 of 3: configuring MCP clients")
        entries = self.build_entries(account_id)
        results = configure_clients(self._client_paths, entries)
        report = SetupReport(
            account_id=account_id,
            results=results,
            manual_config=manual_config(entries),
        )
        _logger.info("Configured %d of %d client(s)", report.success_count, len(results))
        return report


__all__ = ["SetupReport", "SetupService", "resolve_runtime"]
