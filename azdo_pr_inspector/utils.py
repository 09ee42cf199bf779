"""Helpers shared by the CLI commands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Tuple

from .cache import CacheManager
from .config import Config
from .formatters import JsonFormatter, TableFormatter
from .services import PullRequestService
from .source import AzureCliSource
from .store import JsonFileStore
from .viewed import ViewedTracker

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(
    log_level: Optional[str], default_to_warning: bool = False
) -> None:
    """Configure root logging to stderr.

    Leaves logging untouched when no level is given, unless
    default_to_warning asks for a WARNING baseline.
    """
    if log_level is None and not default_to_warning:
        return
    level = getattr(logging, (log_level or "WARNING").upper(), logging.WARNING)
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)
    root.setLevel(level)


def create_command_dependencies(
    config: Config,
) -> Tuple[PullRequestService, ViewedTracker, TableFormatter, JsonFormatter]:
    """Wire the store, cache, tracker, source and formatters from config."""
    store = JsonFileStore(Path(config.store_path))
    cache = (
        CacheManager(store, ttl=config.cache_ttl) if config.cache_enabled else None
    )
    source = AzureCliSource(az_path=config.az_path, timeout=config.timeout)
    service = PullRequestService(source, cache)
    tracker = ViewedTracker(store, ttl_days=config.viewed_ttl_days)
    return service, tracker, TableFormatter(), JsonFormatter()
