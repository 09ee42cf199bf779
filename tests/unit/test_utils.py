"""Unit tests for CLI wiring helpers."""

import logging

from azdo_pr_inspector import utils
from azdo_pr_inspector.config import Config
from azdo_pr_inspector.source import AzureCliSource
from azdo_pr_inspector.store import JsonFileStore


def test_create_command_dependencies(tmp_path):
    config = Config(
        organization="contoso",
        project="proj",
        repository="repo",
        cache_ttl=60,
        az_path="/opt/az",
        timeout=5,
        store_path=str(tmp_path / "storage.json"),
    )

    service, tracker, table_formatter, json_formatter = (
        utils.create_command_dependencies(config)
    )

    assert isinstance(service.source, AzureCliSource)
    assert service.source.az_path == "/opt/az"
    assert service.source.timeout == 5
    assert service.cache is not None
    assert isinstance(service.cache._store, JsonFileStore)
    assert tracker._store is service.cache._store


def test_cache_disabled(tmp_path):
    config = Config(
        organization="o",
        project="p",
        repository="r",
        cache_enabled=False,
        store_path=str(tmp_path / "s.json"),
    )
    service, _, _, _ = utils.create_command_dependencies(config)
    assert service.cache is None


def test_configure_logging_sets_level():
    root = logging.getLogger()
    previous = root.level
    try:
        utils.configure_logging("debug")
        assert root.level == logging.DEBUG
        utils.configure_logging(None, default_to_warning=True)
        assert root.level == logging.WARNING
    finally:
        root.setLevel(previous)


def test_configure_logging_noop_without_level():
    root = logging.getLogger()
    root.setLevel(logging.ERROR)
    try:
        utils.configure_logging(None)
        assert root.level == logging.ERROR
    finally:
        root.setLevel(logging.WARNING)
