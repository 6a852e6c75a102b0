import sys

from cfmcp.infrastructure.wrangler import run_login


def test_run_login_captures_exit_status_and_stderr() -> None:
    result = run_login(
        [sys.executable, "-c", "import sys; sys.stderr.write('opening browser'); sys.exit(3)"]
    )

    assert result.returncode == 3
    assert not result.ok
    assert "opening browser" in result.stderr


def test_missing_command_reports_failure() -> None:
    result = run_login(["definitely-not-a-real-command-cfmcp"])

    assert result.returncode == 127
    assert not result.ok
