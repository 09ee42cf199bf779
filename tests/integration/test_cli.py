import json
from unittest.mock import AsyncMock, patch

import pytest
from click.testing import CliRunner

from azdo_pr_inspector import cli as root_cli
from azdo_pr_inspector.cache import CacheManager
from azdo_pr_inspector.exceptions import SourceUnavailableError
from azdo_pr_inspector.formatters import JsonFormatter, TableFormatter
from azdo_pr_inspector.services import PullRequestService
from azdo_pr_inspector.source import NOT_LOGGED_IN_MESSAGE
from azdo_pr_inspector.viewed import ViewedTracker


@pytest.fixture
def env(monkeypatch, tmp_path):
    monkeypatch.setenv("AZDO_ORGANIZATION", "contoso")
    monkeypatch.setenv("AZDO_PROJECT", "proj")
    monkeypatch.setenv("AZDO_REPOSITORY", "repo")
    monkeypatch.setenv("AZDO_CONFIG", str(tmp_path / "absent.toml"))
    monkeypatch.delenv("AZDO_LOG_LEVEL", raising=False)


@pytest.fixture
def source(raw_pr_factory):
    source = AsyncMock()
    source.list_pull_requests.return_value = [raw_pr_factory(1), raw_pr_factory(2)]
    return source


@pytest.fixture
def deps(source, store, clock):
    """Patch dependency wiring so every CLI run shares one in-memory store."""

    def build(config):
        service = PullRequestService(
            source, CacheManager(store, clock=clock), clock=clock
        )
        tracker = ViewedTracker(store, clock=clock)
        return service, tracker, TableFormatter(), JsonFormatter()

    with patch(
        "azdo_pr_inspector.utils.create_command_dependencies", side_effect=build
    ) as mock_deps:
        yield mock_deps


def test_cli_help_shows_without_args():
    runner = CliRunner()
    result = runner.invoke(root_cli, [])
    assert result.exit_code == 0
    assert "Azure DevOps PR Inspector" in result.output


def test_subcommand_help_needs_no_config(monkeypatch, tmp_path):
    monkeypatch.delenv("AZDO_ORGANIZATION", raising=False)
    runner = CliRunner()
    result = runner.invoke(
        root_cli, ["--config", str(tmp_path / "none.toml"), "list", "--help"]
    )
    assert result.exit_code == 0
    assert "--days" in result.output


def test_missing_settings_show_friendly_error(monkeypatch, tmp_path):
    for var in ("AZDO_ORGANIZATION", "AZDO_PROJECT", "AZDO_REPOSITORY"):
        monkeypatch.delenv(var, raising=False)
    runner = CliRunner()
    result = runner.invoke(root_cli, ["--config", str(tmp_path / "x.toml"), "list"])
    assert result.exit_code != 0
    assert "Missing required setting(s)" in result.output


def test_list_then_cached(env, deps, source):
    runner = CliRunner()
    first = runner.invoke(root_cli, ["list", "--format", "json"], catch_exceptions=False)
    second = runner.invoke(root_cli, ["list", "--format", "json"])

    assert first.exit_code == 0
    assert [d["pullRequestId"] for d in json.loads(first.output)] == [1, 2]
    assert second.output == first.output
    assert source.list_pull_requests.await_count == 1


def test_list_refresh_and_days(env, deps, source):
    runner = CliRunner()
    runner.invoke(root_cli, ["list", "--days", "14"])
    result = runner.invoke(root_cli, ["list", "--days", "14", "--refresh"])

    assert result.exit_code == 0
    assert "Pull Requests in repo (last 14 days)" in result.output
    assert source.list_pull_requests.await_count == 2


def test_invalid_day_range_rejected(env, deps):
    result = CliRunner().invoke(root_cli, ["list", "--days", "10"])
    assert result.exit_code == 2


def test_repository_option_overrides_env(env, deps, source):
    result = CliRunner().invoke(root_cli, ["--repository", "other", "list"])
    assert result.exit_code == 0
    args = source.list_pull_requests.await_args.args
    assert args[:3] == ("contoso", "proj", "other")


def test_source_unavailable_is_reported(env, deps, source):
    source.list_pull_requests.side_effect = SourceUnavailableError(NOT_LOGGED_IN_MESSAGE)
    result = CliRunner().invoke(root_cli, ["list"])
    assert result.exit_code == 1
    assert "Please run 'az login' first." in result.output


def test_toggle_show_and_viewed(env, deps):
    runner = CliRunner()

    toggled = runner.invoke(root_cli, ["toggle", "2"])
    assert toggled.exit_code == 0
    assert "Marked as viewed: PR #2" in toggled.output

    shown = runner.invoke(root_cli, ["show", "2", "--format", "json"])
    assert json.loads(shown.output)["viewed"] is True

    viewed = runner.invoke(root_cli, ["viewed", "--format", "json"])
    assert list(json.loads(viewed.output)) == ["2"]

    hidden = runner.invoke(root_cli, ["list", "--hide-viewed", "--format", "json"])
    assert [d["pullRequestId"] for d in json.loads(hidden.output)] == [1]

    untoggled = runner.invoke(root_cli, ["toggle", "2"])
    assert "Marked as unread: PR #2" in untoggled.output


def test_show_unknown_pr(env, deps):
    result = CliRunner().invoke(root_cli, ["show", "404"])
    assert result.exit_code == 1
    assert "Pull request #404 not found" in result.output


def test_show_detail_table(env, deps):
    result = CliRunner().invoke(root_cli, ["show", "1"])
    assert result.exit_code == 0
    assert "Add feature 1" in result.output
    assert "No description provided" not in result.output


def test_cache_commands(env, deps, source, clock):
    runner = CliRunner()
    runner.invoke(root_cli, ["list"])

    cleared = runner.invoke(root_cli, ["cache", "clear"])
    assert "Cleared cached pull requests for repo (last 7 days)" in cleared.output

    runner.invoke(root_cli, ["list"])
    clock.advance(hours=3)
    swept = runner.invoke(root_cli, ["cache", "sweep"])
    assert "Removed 1 expired cache entry" in swept.output
    assert source.list_pull_requests.await_count == 2


def test_viewed_and_sweep_need_no_repository(monkeypatch, tmp_path, deps):
    for var in ("AZDO_ORGANIZATION", "AZDO_PROJECT", "AZDO_REPOSITORY"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("AZDO_CONFIG", str(tmp_path / "absent.toml"))
    runner = CliRunner()

    viewed = runner.invoke(root_cli, ["viewed", "--format", "json"])
    swept = runner.invoke(root_cli, ["cache", "sweep"])

    assert viewed.exit_code == 0, viewed.output
    assert json.loads(viewed.output) == {}
    assert swept.exit_code == 0, swept.output
    assert "Removed 0 expired cache entries" in swept.output
