"""Install the Cloudflare launch entry into each MCP client's configuration.

Every client keeps its MCP servers under a top-level ``mcpServers`` object.
This module owns exactly one key in that object, ``cloudflare``; everything
else in the file is carried over unchanged. Each client is handled on its own
so that a missing or broken client never prevents configuring the others.
"""

from __future__ import annotations

import json
import os
import shutil
import tempfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Mapping

from cfmcp.domain.models import SERVER_KEY, SERVERS_KEY, LaunchEntry, TargetApp
from cfmcp.infrastructure.observability import get_logger, log_context

_logger = get_logger(__name__)


class MalformedConfigError(ValueError):
    """Raised when an existing client configuration cannot be merged into."""


class ConfigureStatus(str, Enum):
    CONFIGURED = "configured"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class ConfigureResult:
    """Outcome of configuring a single client."""

    target: TargetApp
    path: Path
    status: ConfigureStatus
    reason: str | None = None
    replaced: Any = None

    @property
    def ok(self) -> bool:
        return self.status is ConfigureStatus.CONFIGURED

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "client": self.target.value,
            "path": str(self.path),
            "status": self.status.value,
        }
        if self.reason:
            payload["reason"] = self.reason
        return payload


def load_document(path: Path) -> dict[str, Any]:
    """Read the client's configuration; an absent or blank file reads as empty.

    Raises:
        MalformedConfigError: The file is not a JSON object, or its
            ``mcpServers`` member is not an object.
    """
    if not path.exists():
        return {SERVERS_KEY: {}}
    try:
        text = path.read_text(encoding="utf-8")
        if not text.strip():
            return {SERVERS_KEY: {}}
        parsed = json.loads(text)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise MalformedConfigError(f"Malformed JSON in {path}: {exc}") from exc
    if not isinstance(parsed, dict):
        raise MalformedConfigError(f"Malformed JSON in {path}: root must be an object")
    servers = parsed.get(SERVERS_KEY)
    if servers is not None and not isinstance(servers, dict):
        raise MalformedConfigError(
            f"Malformed JSON in {path}: `{SERVERS_KEY}` must be an object"
        )
    return parsed


def merge_entry(document: Mapping[str, Any], entry: LaunchEntry) -> dict[str, Any]:
    """Return a copy of *document* with ``mcpServers.cloudflare`` set to *entry*.

    The previous ``cloudflare`` value, if any, is replaced wholesale.
    """
    merged = dict(document)
    servers = dict(merged.get(SERVERS_KEY) or {})
    servers[SERVER_KEY] = entry.to_json()
    merged[SERVERS_KEY] = servers
    return merged


def write_document(path: Path, document: Mapping[str, Any]) -> None:
    """Write *document* as indented JSON via a temp file and atomic rename.

    A symlinked configuration is written through to its target, and an
    existing file keeps its permission bits.
    """
    target = path.resolve()
    temp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=str(target.parent),
            prefix=f".{target.name}.",
            suffix=".tmp",
            delete=False,
        ) as handle:
            temp_path = Path(handle.name)
            json.dump(document, handle, indent=2)
            handle.write("\n")
        if target.exists():
            shutil.copymode(target, temp_path)
        os.replace(temp_path, target)
    finally:
        if temp_path is not None and temp_path.exists():
            temp_path.unlink(missing_ok=True)


def merge_config(target: TargetApp, path: Path, entry: LaunchEntry) -> ConfigureResult:
    """Install *entry* into the configuration file of *target* at *path*.

    A client whose configuration directory does not exist is treated as not
    installed and skipped without creating anything. Malformed JSON and
    filesystem errors are reported as a failed result rather than raised.
    """
    with log_context(client=target.value):
        config_dir = path.parent
        if not config_dir.is_dir():
            _logger.info("%s config directory not found at: %s", target.display_name, config_dir)
            return ConfigureResult(
                target, path, ConfigureStatus.SKIPPED,
                reason=f"config directory not found at {config_dir}",
            )

        try:
            document = load_document(path)
            previous = (document.get(SERVERS_KEY) or {}).get(SERVER_KEY)
            if previous is not None:
                _logger.info(
                    "Replacing existing Cloudflare MCP config: %s", json.dumps(previous)
                )
            write_document(path, merge_entry(document, entry))
        except (MalformedConfigError, OSError) as exc:
            _logger.error("Error configuring %s: %s", target.display_name, exc)
            return ConfigureResult(target, path, ConfigureStatus.FAILED, reason=str(exc))

        _logger.info("Successfully configured %s, wrote %s", target.display_name, path)
        return ConfigureResult(target, path, ConfigureStatus.CONFIGURED, replaced=previous)


def configure_clients(
    paths: Mapping[TargetApp, Path],
    entries: Mapping[TargetApp, LaunchEntry],
) -> list[ConfigureResult]:
    """Configure every client in :class:`TargetApp` order, never stopping early."""
    results: list[ConfigureResult] = []
    for target in TargetApp:
        if target not in paths:
            continue
        results.append(merge_config(target, paths[target], entries[target]))
    return results


def manual_config(entries: Mapping[TargetApp, LaunchEntry]) -> dict[str, Any]:
    """Payload shown to the user when no client could be configured."""
    return {
        SERVERS_KEY: {
            SERVER_KEY: {target.value: entry.to_json() for target, entry in entries.items()}
        }
    }


__all__ = [
    "ConfigureResult",
    "ConfigureStatus",
    "MalformedConfigError",
    "configure_clients",
    "load_document",
    "manual_config",
    "merge_config",
    "merge_entry",
    "write_document",
]
