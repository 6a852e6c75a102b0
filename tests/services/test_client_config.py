from __future__ import annotations

import json
import stat
import sys
from pathlib import Path

import pytest

from cfmcp.domain.models import TargetApp, launch_entry_for
from cfmcp.services.client_config import (
    ConfigureStatus,
    configure_clients,
    manual_config,
    merge_config,
)

PYTHON = "/usr/bin/python3"


def _entry(target: TargetApp = TargetApp.CURSOR, account: str = "abc"):
    return launch_entry_for(target, PYTHON, account)


def _read(path: Path) -> dict:
    return json.loads(path.read_text(encoding="utf-8"))


def test_missing_directory_is_skipped_without_touching_disk(tmp_path: Path) -> None:
    path = tmp_path / ".cursor" / "mcp.json"

    result = merge_config(TargetApp.CURSOR, path, _entry())

    assert result.status is ConfigureStatus.SKIPPED
    assert not result.ok
    assert not path.parent.exists()
    assert list(tmp_path.iterdir()) == []


def test_absent_file_is_created(tmp_path: Path) -> None:
    path = tmp_path / "mcp.json"

    result = merge_config(TargetApp.CURSOR, path, _entry())

    assert result.ok
    assert _read(path) == {
        "mcpServers": {
            "cloudflare": {"command": PYTHON, "args": ["-m", "cfmcp", "run", "abc"]}
        }
    }
    assert path.read_text(encoding="utf-8").endswith("}\n")


def test_existing_siblings_are_preserved(tmp_path: Path) -> None:
    path = tmp_path / "claude_desktop_config.json"
    path.write_text(
        json.dumps(
            {
                "mcpServers": {"other": {"x": 1}, "cloudflare": {"command": "node"}},
                "unrelatedTop": True,
                "theme": {"dark": [1, 2, 3]},
            }
        ),
        encoding="utf-8",
    )

    result = merge_config(TargetApp.CLAUDE, path, _entry(TargetApp.CLAUDE))

    assert result.ok
    assert result.replaced == {"command": "node"}
    document = _read(path)
    assert document["unrelatedTop"] is True
    assert document["theme"] == {"dark": [1, 2, 3]}
    assert document["mcpServers"]["other"] == {"x": 1}
    assert document["mcpServers"]["cloudflare"] == _entry(TargetApp.CLAUDE).to_json()


def test_missing_servers_map_is_added(tmp_path: Path) -> None:
    path = tmp_path / "mcp.json"
    path.write_text('{"editor": "vim"}', encoding="utf-8")

    assert merge_config(TargetApp.CURSOR, path, _entry()).ok
    document = _read(path)
    assert document["editor"] == "vim"
    assert "cloudflare" in document["mcpServers"]


def test_merge_is_idempotent(tmp_path: Path) -> None:
    path = tmp_path / "mcp.json"
    path.write_text('{"mcpServers": {"other": {"x": 1}}}', encoding="utf-8")

    merge_config(TargetApp.CURSOR, path, _entry())
    first = path.read_bytes()
    merge_config(TargetApp.CURSOR, path, _entry())

    assert path.read_bytes() == first


@pytest.mark.parametrize(
    "content",
    ["{not json", "[1, 2, 3]", '{"mcpServers": ["cloudflare"]}'],
)
def test_malformed_file_fails_and_is_left_alone(tmp_path: Path, content: str) -> None:
    path = tmp_path / "mcp.json"
    path.write_text(content, encoding="utf-8")

    result = merge_config(TargetApp.CURSOR, path, _entry())

    assert result.status is ConfigureStatus.FAILED
    assert "Malformed JSON" in result.reason
    assert path.read_text(encoding="utf-8") == content
    assert [p.name for p in tmp_path.iterdir()] == ["mcp.json"]


def test_filesystem_error_is_reported(tmp_path: Path) -> None:
    path = tmp_path / "mcp.json"
    path.mkdir()

    result = merge_config(TargetApp.CURSOR, path, _entry())

    assert result.status is ConfigureStatus.FAILED
    assert result.reason


def test_cline_entry_carries_its_extra_flags(tmp_path: Path) -> None:
    path = tmp_path / "cline_mcp_settings.json"

    merge_config(TargetApp.CLINE, path, _entry(TargetApp.CLINE))

    assert _read(path)["mcpServers"]["cloudflare"] == {
        "command": PYTHON,
        "args": ["-m", "cfmcp", "run", "abc"],
        "disabled": False,
        "autoApprove": [],
    }


@pytest.mark.skipif(sys.platform == "win32", reason="needs POSIX symlinks and modes")
def test_symlinked_config_is_written_through_and_keeps_its_mode(tmp_path: Path) -> None:
    real = tmp_path / "dotfiles" / "mcp.json"
    real.parent.mkdir()
    real.write_text('{"mcpServers": {"other": {"x": 1}}}', encoding="utf-8")
    real.chmod(0o644)
    link = tmp_path / ".cursor" / "mcp.json"
    link.parent.mkdir()
    link.symlink_to(real)

    result = merge_config(TargetApp.CURSOR, link, _entry())

    assert result.ok
    assert link.is_symlink()
    servers = _read(real)["mcpServers"]
    assert servers["other"] == {"x": 1}
    assert servers["cloudflare"]["args"] == ["-m", "cfmcp", "run", "abc"]
    assert stat.S_IMODE(real.stat().st_mode) == 0o644
    assert sorted(p.name for p in real.parent.iterdir()) == ["mcp.json"]


def test_one_failure_does_not_stop_other_clients(tmp_path: Path) -> None:
    broken = tmp_path / "claude" / "claude_desktop_config.json"
    broken.parent.mkdir()
    broken.write_text("{oops", encoding="utf-8")
    good = tmp_path / "cursor" / "mcp.json"
    good.parent.mkdir()
    paths = {
        TargetApp.CLINE: tmp_path / "missing" / "cline.json",
        TargetApp.CLAUDE: broken,
        TargetApp.WINDSURF: tmp_path / "also-missing" / "mcp_config.json",
        TargetApp.CURSOR: good,
    }
    entries = {target: _entry(target) for target in TargetApp}

    results = configure_clients(paths, entries)

    assert [r.target for r in results] == list(TargetApp)
    assert [r.status for r in results] == [
        ConfigureStatus.SKIPPED,
        ConfigureStatus.FAILED,
        ConfigureStatus.SKIPPED,
        ConfigureStatus.CONFIGURED,
    ]
    assert good.exists()


def test_manual_config_lists_every_client() -> None:
    entries = {target: _entry(target) for target in TargetApp}

    payload = manual_config(entries)

    assert set(payload["mcpServers"]["cloudflare"]) == {"cline", "claude", "windsurf", "cursor"}
