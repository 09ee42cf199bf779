"""Command-line interface for Azure DevOps PR Inspector using Click."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Type

import click

from . import utils
from .commands import (
    BaseCommand,
    CacheCommand,
    ListCommand,
    ShowCommand,
    ToggleCommand,
    ViewedCommand,
)
from .config import DAY_RANGES, DEFAULT_CONFIG_FILE, REQUIRED_FIELDS, Config
from .exceptions import AzdoInspectorError

logger = logging.getLogger(__name__)

LOG_LEVELS = ["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET"]


def log_level_option(f: Any) -> Any:
    return click.option(
        "--log-level",
        "log_level",
        type=click.Choice(LOG_LEVELS, case_sensitive=False),
        help="Set logging level",
        envvar="AZDO_LOG_LEVEL",
    )(f)


def days_option(f: Any) -> Any:
    return click.option(
        "--days",
        "day_range",
        type=click.Choice([str(d) for d in DAY_RANGES]),
        default=None,
        help="Look-back window in days (default: configured day_range, 7)",
    )(f)


def format_option(f: Any) -> Any:
    return click.option(
        "--format",
        "output_format",
        type=click.Choice(["table", "json"], case_sensitive=False),
        default="table",
    )(f)


def _load_config(ctx: click.Context, require_repository: bool = True) -> Config:
    """Resolve configuration from file, environment and group options."""
    obj = ctx.obj or {}
    config_file = obj.get("config_file")
    try:
        return Config.from_sources(
            Path(config_file) if config_file else None,
            required=REQUIRED_FIELDS if require_repository else (),
            organization=obj.get("organization"),
            project=obj.get("project"),
            repository=obj.get("repository"),
        )
    except ValueError as e:
        raise click.ClickException(str(e)) from e


def _execute(
    ctx: click.Context,
    command_cls: Type[BaseCommand],
    log_level: str | None,
    *,
    require_repository: bool = True,
    **kwargs: Any,
) -> str:
    """Build a command with its dependencies, run it and map errors."""
    utils.configure_logging(log_level)
    config = _load_config(ctx, require_repository)

    async def _run() -> str:
        service, tracker, table_formatter, json_formatter = (
            utils.create_command_dependencies(config)
        )
        cmd = command_cls(config, service, tracker, table_formatter, json_formatter)
        return await cmd.execute(**kwargs)

    try:
        return asyncio.run(_run())
    except AzdoInspectorError as e:
        raise click.ClickException(str(e)) from e
    except Exception as e:
        logger.debug("Unexpected error", exc_info=True)
        raise click.ClickException(f"Unexpected error: {e}") from e


@click.group(invoke_without_command=True)
@click.option(
    "--config",
    "config_file",
    type=click.Path(dir_okay=False),
    default=str(DEFAULT_CONFIG_FILE.expanduser()),
    show_default=True,
    help="Configuration file (TOML or JSON); ignored if it does not exist",
    envvar="AZDO_CONFIG",
)
@click.option("--organization", help="Azure DevOps organization")
@click.option("--project", help="Azure DevOps project")
@click.option("--repository", help="Repository name")
@log_level_option
@click.pass_context
def cli(
    ctx: click.Context,
    config_file: str | None,
    organization: str | None,
    project: str | None,
    repository: str | None,
    log_level: str | None,
) -> None:
    """Azure DevOps PR Inspector - list recent pull requests and track what you've viewed.

    Subcommands:
      - list: recent pull requests (cached for 2 hours)
      - show: details of one pull request
      - toggle: mark a pull request as viewed or unread
      - viewed: pull requests marked as viewed
      - cache: sweep or clear cached lists

    Authentication:
      Delegated to the Azure CLI. Run 'az login' first.
    """
    utils.configure_logging(log_level, default_to_warning=True)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit()

    ctx.obj = {
        "config_file": config_file,
        "organization": organization,
        "project": project,
        "repository": repository,
    }


@cli.command("list")
@days_option
@click.option(
    "--refresh", "force_refresh", is_flag=True, help="Ignore the cache and refetch"
)
@click.option("--hide-viewed", is_flag=True, help="Hide pull requests marked as viewed")
@format_option
@log_level_option
@click.pass_context
def list_pull_requests(
    ctx: click.Context,
    day_range: str | None,
    force_refresh: bool,
    hide_viewed: bool,
    output_format: str,
    log_level: str | None,
) -> None:
    """List pull requests created in the last N days."""
    output = _execute(
        ctx,
        ListCommand,
        log_level,
        day_range=int(day_range) if day_range else None,
        force_refresh=force_refresh,
        hide_viewed=hide_viewed,
        output_format=output_format,
    )
    click.echo(output, nl=False)


@cli.command("show")
@click.argument("pr_id", type=int)
@days_option
@click.option("--mark-viewed", is_flag=True, help="Also mark the pull request as viewed")
@format_option
@log_level_option
@click.pass_context
def show_pull_request(
    ctx: click.Context,
    pr_id: int,
    day_range: str | None,
    mark_viewed: bool,
    output_format: str,
    log_level: str | None,
) -> None:
    """Show details of a pull request from the recent list."""
    output = _execute(
        ctx,
        ShowCommand,
        log_level,
        pr_id=pr_id,
        day_range=int(day_range) if day_range else None,
        mark_viewed=mark_viewed,
        output_format=output_format,
    )
    click.echo(output, nl=False)


@cli.command("toggle")
@click.argument("pr_id", type=int)
@days_option
@log_level_option
@click.pass_context
def toggle_viewed(
    ctx: click.Context,
    pr_id: int,
    day_range: str | None,
    log_level: str | None,
) -> None:
    """Mark a pull request as viewed, or as unread if it already is."""
    output = _execute(
        ctx,
        ToggleCommand,
        log_level,
        pr_id=pr_id,
        day_range=int(day_range) if day_range else None,
    )
    click.echo(output)


@cli.command("viewed")
@format_option
@log_level_option
@click.pass_context
def list_viewed(ctx: click.Context, output_format: str, log_level: str | None) -> None:
    """List pull requests marked as viewed in the last 30 days."""
    output = _execute(
        ctx,
        ViewedCommand,
        log_level,
        require_repository=False,
        output_format=output_format,
    )
    click.echo(output, nl=False)


@cli.group("cache")
def cache_group() -> None:
    """Inspect and maintain the pull request cache."""


@cache_group.command("sweep")
@log_level_option
@click.pass_context
def cache_sweep(ctx: click.Context, log_level: str | None) -> None:
    """Remove expired or corrupt cache entries."""
    click.echo(
        _execute(
            ctx, CacheCommand, log_level, require_repository=False, action="sweep"
        )
    )


@cache_group.command("clear")
@days_option
@log_level_option
@click.pass_context
def cache_clear(ctx: click.Context, day_range: str | None, log_level: str | None) -> None:
    """Drop the cached list for the configured repository."""
    click.echo(
        _execute(
            ctx,
            CacheCommand,
            log_level,
            action="clear",
            day_range=int(day_range) if day_range else None,
        )
    )
