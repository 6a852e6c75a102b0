"""MCP client targets and the launch entry written into their configuration."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

SERVER_KEY = "cloudflare"
SERVERS_KEY = "mcpServers"
RUN_COMMAND = "run"


class TargetApp(str, Enum):
    """Desktop MCP clients that can receive a Cloudflare launch entry."""

    CLINE = "cline"
    CLAUDE = "claude"
    WINDSURF = "windsurf"
    CURSOR = "cursor"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES = {
    TargetApp.CLINE: "Cline",
    TargetApp.CLAUDE: "Claude Desktop",
    TargetApp.WINDSURF: "Windsurf",
    TargetApp.CURSOR: "Cursor",
}


class AccountRef(BaseModel):
    """A Cloudflare account the authenticated user can access."""

    model_config = ConfigDict(extra="ignore")

    id: str
    name: str = ""


class LaunchEntry(BaseModel):
    """How an MCP client starts the Cloudflare server as a subprocess."""

    model_config = ConfigDict(extra="forbid")

    command: str
    args: list[str]

    def to_json(self) -> dict[str, object]:
        return self.model_dump(by_alias=True)


class ClineLaunchEntry(LaunchEntry):
    """Cline additionally expects the enabled state and auto-approved tools."""

    disabled: bool = False
    auto_approve: list[str] = Field(default_factory=list, alias="autoApprove")


_ENTRY_SHAPES: dict[TargetApp, type[LaunchEntry]] = {
    TargetApp.CLINE: ClineLaunchEntry,
    TargetApp.CLAUDE: LaunchEntry,
    TargetApp.WINDSURF: LaunchEntry,
    TargetApp.CURSOR: LaunchEntry,
}


def server_args(account_id: str) -> list[str]:
    """Arguments that start the Cloudflare MCP server for *account_id*."""
    return ["-m", "cfmcp", RUN_COMMAND, account_id]


def launch_entry_for(target: TargetApp, command: str, account_id: str) -> LaunchEntry:
    """Build the launch entry shaped the way *target* expects it.

    ``target`` must be a :class:`TargetApp`; plain client names are converted
    first so that an unknown name fails instead of silently picking a shape.
    """
    shape = _ENTRY_SHAPES[TargetApp(target)]
    return shape(command=command, args=server_args(account_id))


__all__ = [
    "AccountRef",
    "ClineLaunchEntry",
    "LaunchEntry",
    "RUN_COMMAND",
    "SERVERS_KEY",
    "SERVER_KEY",
    "TargetApp",
    "launch_entry_for",
    "server_args",
]
