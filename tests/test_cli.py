# File: tests/test_cli.py

"""Tests for the blogdb command line."""

import pytest
from typer.testing import CliRunner

from app.cli import app


@pytest.fixture
def cli_runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def database_url(tmp_path) -> str:
    return f"sqlite:///{tmp_path / 'cli.db'}"


def _invoke(cli_runner, database_url, *args):
    return cli_runner.invoke(app, ["--database-url", database_url, *args])


def test_help_lists_commands(cli_runner):
    result = cli_runner.invoke(app, ["--help"])

    assert result.exit_code == 0
    for command in ("init-db", "seed", "indexes", "explain", "compare"):
        assert command in result.stdout


def test_init_seed_and_inspect(cli_runner, database_url):
    result = _invoke(cli_runner, database_url, "init-db")
    assert result.exit_code == 0, result.stdout
    assert "Schema created" in result.stdout

    result = _invoke(
        cli_runner, database_url, "seed", "--users", "4", "--posts-per-user", "3", "--comments-per-post", "2"
    )
    assert result.exit_code == 0, result.stdout
    assert "4 users, 12 posts, 24 comments" in result.stdout

    result = _invoke(cli_runner, database_url, "indexes")
    assert result.exit_code == 0, result.stdout
    assert "idx_user_email" in result.stdout
    assert "idx_post_user_created" in result.stdout

    result = _invoke(cli_runner, database_url, "explain")
    assert result.exit_code == 0, result.stdout
    assert "Query plans" in result.stdout

    result = _invoke(cli_runner, database_url, "compare")
    assert result.exit_code == 0, result.stdout
    assert "Load strategies" in result.stdout


def test_init_db_drop_recreates_empty_schema(cli_runner, database_url):
    _invoke(cli_runner, database_url, "init-db")
    _invoke(cli_runner, database_url, "seed", "--users", "2", "--posts-per-user", "1")

    result = _invoke(cli_runner, database_url, "init-db", "--drop")
    assert result.exit_code == 0, result.stdout

    # same emails again would violate idx_user_email if the old rows survived
    result = _invoke(cli_runner, database_url, "seed", "--users", "2", "--posts-per-user", "1")
    assert result.exit_code == 0, result.stdout


def test_seed_rejects_zero_users(cli_runner, database_url):
    _invoke(cli_runner, database_url, "init-db")
    result = _invoke(cli_runner, database_url, "seed", "--users", "0")

    assert result.exit_code != 0
