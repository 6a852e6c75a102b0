"""Configuration for the setup command.

Settings come from the environment and, optionally, a JSON file named by
``CFMCP_CONFIG``. The home directory and platform are passed in so that every
path below can be computed for a fake home in tests.
"""

from __future__ import annotations

import json
import shlex
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping

from cfmcp.domain.models import TargetApp
from cfmcp.infrastructure.http.client import DEFAULT_API_BASE_URL

DEFAULT_LOGIN_COMMAND = "npx wrangler@latest login"
DEFAULT_SERVER_COMMAND = "npx -y @cloudflare/mcp-server-cloudflare"
DEFAULT_PYTHON_NAMES = ("python3", "python")

_CLINE_SETTINGS = Path(
    "Code", "User", "globalStorage", "saoudrizwan.claude-dev", "settings",
    "cline_mcp_settings.json",
)
_CLAUDE_SETTINGS = Path("Claude", "claude_desktop_config.json")


def load_config(path: Path | str | None) -> Dict[str, Any]:
    """Load a JSON configuration file, or return ``{}`` when there is none."""

    if path is None:
        return {}
    path = Path(path).expanduser()
    if not path.exists():
        return {}
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Configuration file {path} must contain a JSON object")
    return data


def parse_command(value: Any, name: str) -> list[str]:
    """Split a command given as a shell-style string or a list of strings."""
    if isinstance(value, str):
        command = shlex.split(value)
    elif isinstance(value, list) and all(isinstance(part, str) for part in value):
        command = list(value)
    else:
        raise ValueError(f"'{name}' must be a string or a list of strings")
    if not command:
        raise ValueError(f"'{name}' must not be empty")
    return command


def _app_data_dir(home: Path, platform: str, appdata: str | None) -> Path:
    """Per-user application data directory for *platform*."""
    if platform == "darwin":
        return home / "Library" / "Application Support"
    if platform == "win32":
        return Path(appdata) if appdata else home / "AppData" / "Roaming"
    return home / ".config"


def client_config_paths(
    home: Path,
    platform: str = sys.platform,
    appdata: str | None = None,
) -> dict[TargetApp, Path]:
    """Return the MCP configuration file of every target client.

    Cline and Claude Desktop keep their settings under the platform's
    application data directory; Windsurf and Cursor use dot-directories in
    the home directory on every platform.
    """
    app_data = _app_data_dir(home, platform, appdata)
    return {
        TargetApp.CLINE: app_data / _CLINE_SETTINGS,
        TargetApp.CLAUDE: app_data / _CLAUDE_SETTINGS,
        TargetApp.WINDSURF: home / ".codeium" / "windsurf" / "mcp_config.json",
        TargetApp.CURSOR: home / ".cursor" / "mcp.json",
    }


def wrangler_config_dir(
    home: Path,
    platform: str = sys.platform,
    environ: Mapping[str, str] | None = None,
) -> Path:
    """Locate Wrangler's global configuration directory.

    ``WRANGLER_HOME`` wins, then the legacy ``~/.wrangler`` directory if it
    exists, then the platform's configuration directory.
    """
    environ = environ or {}
    override = environ.get("WRANGLER_HOME")
    if override:
        return Path(override).expanduser()
    legacy = home / ".wrangler"
    if legacy.is_dir():
        return legacy
    if platform == "darwin":
        return home / "Library" / "Preferences" / ".wrangler"
    if platform == "win32":
        appdata = environ.get("APPDATA")
        base = Path(appdata) if appdata else home / "AppData" / "Roaming"
        return base / "xdg.config" / ".wrangler"
    xdg = environ.get("XDG_CONFIG_HOME")
    return (Path(xdg) if xdg else home / ".config") / ".wrangler"


@dataclass(frozen=True)
class SetupSettings:
    """Resolved settings for one run of the setup command."""

    home: Path
    platform: str
    api_base_url: str = DEFAULT_API_BASE_URL
    api_token: str | None = None
    login_command: list[str] = field(
        default_factory=lambda: shlex.split(DEFAULT_LOGIN_COMMAND)
    )
    server_command: list[str] = field(
        default_factory=lambda: shlex.split(DEFAULT_SERVER_COMMAND)
    )
    python_names: tuple[str, ...] = DEFAULT_PYTHON_NAMES
    wrangler_dir: Path | None = None
    client_paths: dict[TargetApp, Path] = field(default_factory=dict)

    @property
    def wrangler_config_path(self) -> Path:
        base = self.wrangler_dir or wrangler_config_dir(self.home, self.platform)
        return base / "config" / "default.toml"


def load_settings(
    environ: Mapping[str, str],
    *,
    home: Path,
    platform: str = sys.platform,
) -> SetupSettings:
    """Build :class:`SetupSettings` from *environ* and the optional config file.

    Environment variables take precedence over values from the file. The
    file may also override individual client paths under ``client_paths``,
    keyed by client name (``cline``, ``claude``, ``windsurf``, ``cursor``).
    """
    cfg = load_config(environ.get("CFMCP_CONFIG"))

    paths = client_config_paths(home, platform, environ.get("APPDATA"))
    overrides = cfg.get("client_paths", {})
    if not isinstance(overrides, dict):
        raise ValueError("'client_paths' must be an object of client name to path")
    for name, raw_path in overrides.items():
        paths[TargetApp(name)] = Path(raw_path).expanduser()

    login_command = environ.get("CFMCP_LOGIN_COMMAND") or cfg.get(
        "login_command", DEFAULT_LOGIN_COMMAND
    )
    server_command = environ.get("CFMCP_SERVER_COMMAND") or cfg.get(
        "server_command", DEFAULT_SERVER_COMMAND
    )
    python_override = environ.get("CFMCP_PYTHON") or cfg.get("python")
    python_names = (python_override,) if python_override else DEFAULT_PYTHON_NAMES

    return SetupSettings(
        home=home,
        platform=platform,
        api_base_url=(
            environ.get("CLOUDFLARE_API_BASE_URL")
            or cfg.get("api_base_url", DEFAULT_API_BASE_URL)
        ).rstrip("/"),
        api_token=environ.get("CLOUDFLARE_API_TOKEN") or None,
        login_command=parse_command(login_command, "login_command"),
        server_command=parse_command(server_command, "server_command"),
        python_names=python_names,
        wrangler_dir=wrangler_config_dir(home, platform, environ),
        client_paths=paths,
    )


__all__ = [
    "DEFAULT_API_BASE_URL",
    "DEFAULT_LOGIN_COMMAND",
    "DEFAULT_SERVER_COMMAND",
    "SetupSettings",
    "client_config_paths",
    "load_config",
    "load_settings",
    "parse_command",
    "wrangler_config_dir",
]
