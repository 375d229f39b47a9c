"""Tests for the command line interface."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import AsyncMock, patch

import click
import pytest
from click.testing import CliRunner

from vitellary.cli import cli, parse_bind
from vitellary.errors import ProcessNotFoundError


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("VITELLARY_REVISION", "VITELLARY_PORT", "VITELLARY_HOST", "VITELLARY_LOG_LEVEL", "VITELLARY_REVISIONS_FILE"):
        monkeypatch.delenv(name, raising=False)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("127.0.0.1:5555", ("127.0.0.1", 5555)),
        ("0.0.0.0:80", ("0.0.0.0", 80)),
        ("[::1]:5555", ("::1", 5555)),
    ],
)
def test_parse_bind(value: str, expected: tuple[str, int]) -> None:
    assert parse_bind(value) == expected


@pytest.mark.parametrize("value", ["5555", ":5555", "host:port", "host:70000"])
def test_parse_bind_rejects(value: str) -> None:
    with pytest.raises(click.BadParameter):
        parse_bind(value)


def test_revisions_without_a_table_lists_nothing() -> None:
    result = CliRunner().invoke(cli, ["revisions"])
    assert result.exit_code == 0
    assert "No revisions known" in result.output
    assert "master" not in result.output.split()


def test_revisions_reads_table_from_environment(monkeypatch: pytest.MonkeyPatch, revisions_file: Path) -> None:
    monkeypatch.setenv("VITELLARY_REVISIONS_FILE", str(revisions_file))
    result = CliRunner().invoke(cli, ["revisions"])
    assert result.exit_code == 0
    assert result.output.split() == ["test-build"]


def test_revisions_with_extra_file(tmp_path: Path) -> None:
    extra = tmp_path / "extra.json"
    extra.write_text(
        json.dumps(
            {
                "layouts": [
                    {
                        "names": ["deadbeef" * 5],
                        "struct_size": 32,
                        "offsets": {"room_x": 0, "room_y": 4, "state": 8, "gamestate": 12, "timer": 16},
                        "active_states": [0],
                    }
                ]
            }
        )
    )
    result = CliRunner().invoke(cli, ["revisions", "--revisions-file", str(extra)])
    assert result.exit_code == 0
    assert "deadbeef" * 5 in result.output.split()


def test_serve_unknown_revision_exits_before_binding() -> None:
    with (
        patch("vitellary.app.WebSocketServer") as server_cls,
        patch("vitellary.app.find_pid") as find_pid,
    ):
        result = CliRunner().invoke(cli, ["serve", "--revision", "9.9.9"])

    assert result.exit_code == 1
    assert "no such revision" in result.output
    server_cls.assert_not_called()
    find_pid.assert_not_called()


def test_serve_default_revision_needs_a_table() -> None:
    with (
        patch("vitellary.app.WebSocketServer") as server_cls,
        patch("vitellary.app.find_pid") as find_pid,
    ):
        result = CliRunner().invoke(cli, ["serve"])

    assert result.exit_code == 1
    assert "no such revision: 'master'" in result.output
    assert "--revisions-file" in result.output
    server_cls.assert_not_called()
    find_pid.assert_not_called()


def test_serve_missing_process(revisions_file: Path) -> None:
    with patch("vitellary.app.find_pid", side_effect=ProcessNotFoundError("no VVVVVV process found")):
        result = CliRunner().invoke(
            cli, ["serve", "--revision", "test-build", "--revisions-file", str(revisions_file)]
        )

    assert result.exit_code == 1
    assert "no VVVVVV process found" in result.output


def test_serve_bad_bind() -> None:
    result = CliRunner().invoke(cli, ["serve", "--bind", "nowhere"])
    assert result.exit_code == 2


def test_serve_passes_options_through(revisions_file: Path) -> None:
    with patch("vitellary.cli.run", new_callable=AsyncMock) as run:
        args = ["serve", "1234", "--revision", "test-build", "--revisions-file", str(revisions_file)]
        result = CliRunner().invoke(cli, [*args, "--bind", "0.0.0.0:6000", "-v"])

    assert result.exit_code == 0, result.output
    settings, pid, table = run.call_args.args
    assert pid == 1234
    assert settings.revision == "test-build"
    assert settings.revisions_file == revisions_file
    assert (settings.host, settings.port) == ("0.0.0.0", 6000)
    assert settings.log_level == "DEBUG"
    assert table.resolve("test-build") is not None
