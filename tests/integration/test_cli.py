"""Tests for the fileserve command-line interface."""

from unittest.mock import patch

import pytest
from click.testing import CliRunner

from fileserve import __version__
from fileserve.cli import cli
from fileserve.infrastructure.auth import jwt_service


@pytest.fixture
def runner(storage_root, monkeypatch):
    monkeypatch.setenv("FILESERVE_ROOT_PATH", str(storage_root))
    return CliRunner()


def test_version(runner):
    result = runner.invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_list_files(runner):
    result = runner.invoke(cli, ["list-files"])

    assert result.exit_code == 0
    assert "photo.png\t" in result.output
    assert "sub/deep.jpg\t" in result.output
    assert "notes.txt\t5\ttext/plain" in result.output


def test_describe(runner):
    result = runner.invoke(cli, ["describe", "sub/deep"])

    assert result.exit_code == 0
    assert "fileName: sub/deep.jpg" in result.output
    assert "contentType: image/jpeg" in result.output


def test_describe_not_found(runner):
    result = runner.invoke(cli, ["describe", "../secret.txt"])

    assert result.exit_code == 1
    assert "Not found: ../secret.txt" in result.output


def test_describe_empty_path(runner):
    result = runner.invoke(cli, ["describe", " "])

    assert result.exit_code == 2
    assert "File path is required" in result.output


def test_issue_token(runner):
    result = runner.invoke(cli, ["issue-token", "alice", "--group", "editors", "--group", "ops"])

    assert result.exit_code == 0
    token = result.output.strip().splitlines()[-1]
    payload = jwt_service.validate_access_token(token)
    assert payload["sub"] == "alice"
    assert payload["groups"] == ["editors", "ops"]


def test_serve_uses_overrides(runner):
    with patch("uvicorn.run") as mock_run:
        result = runner.invoke(cli, ["serve", "--port", "9001", "--no-reload"])

    assert result.exit_code == 0
    mock_run.assert_called_once()
    args, kwargs = mock_run.call_args
    assert args[0] == "fileserve.infrastructure.api.app:app"
    assert kwargs["port"] == 9001
    assert kwargs["reload"] is False
