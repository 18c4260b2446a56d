"""CLI smoke tests — command wiring, no server required."""

from click.testing import CliRunner

from peoplehub.cli.main import main


def test_help_lists_commands():
    result = CliRunner().invoke(main, ["--help"])
    assert result.exit_code == 0
    for command in ("init-db", "seed-superadmin", "login", "invite", "companies"):
        assert command in result.output


def test_version():
    result = CliRunner().invoke(main, ["--version"])
    assert result.exit_code == 0
    assert "0.1.0" in result.output


def test_api_commands_require_token(monkeypatch):
    monkeypatch.delenv("PEOPLEHUB_TOKEN", raising=False)
    result = CliRunner().invoke(main, ["companies"])
    assert result.exit_code == 1
    assert "--token required" in result.output
