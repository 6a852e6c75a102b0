import pytest

from cfmcp.domain.models import ClineLaunchEntry, LaunchEntry, TargetApp, launch_entry_for


def test_every_target_has_an_entry_shape() -> None:
    for target in TargetApp:
        entry = launch_entry_for(target, "/usr/bin/python3", "abc")
        assert entry.args[-2:] == ["run", "abc"]
        assert entry.command == "/usr/bin/python3"


def test_only_cline_gets_extra_flags() -> None:
    assert isinstance(launch_entry_for(TargetApp.CLINE, "py", "abc"), ClineLaunchEntry)
    for target in (TargetApp.CLAUDE, TargetApp.WINDSURF, TargetApp.CURSOR):
        entry = launch_entry_for(target, "py", "abc")
        assert set(entry.to_json()) == {"command", "args"}


def test_client_names_are_accepted() -> None:
    entry = launch_entry_for("cline", "py", "abc")

    assert entry.to_json()["autoApprove"] == []


def test_unknown_client_name_is_rejected() -> None:
    with pytest.raises(ValueError):
        launch_entry_for("vscode", "py", "abc")


def test_launch_entry_rejects_unknown_fields() -> None:
    with pytest.raises(ValueError):
        LaunchEntry(command="py", args=[], env={})
