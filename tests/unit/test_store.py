"""Unit tests for the key-value stores."""

import json

import pytest

from azdo_pr_inspector.exceptions import StoreError
from azdo_pr_inspector.store import JsonFileStore, MemoryStore


class TestMemoryStore:
    @pytest.mark.asyncio
    async def test_basic_operations(self):
        store = MemoryStore()

        assert await store.get_item("k") is None
        await store.set_item("k", "v")
        assert await store.get_item("k") == "v"
        assert await store.all_items() == {"k": "v"}
        await store.remove_item("k")
        await store.remove_item("missing")
        assert await store.all_items() == {}

    @pytest.mark.asyncio
    async def test_all_items_is_a_snapshot(self):
        store = MemoryStore({"a": "1"})
        snapshot = await store.all_items()
        snapshot["b"] = "2"
        assert await store.get_item("b") is None


class TestJsonFileStore:
    @pytest.mark.asyncio
    async def test_persists_across_instances(self, tmp_path):
        path = tmp_path / "nested" / "storage.json"
        await JsonFileStore(path).set_item("key", '{"a": 1}')

        reopened = JsonFileStore(path)
        assert await reopened.get_item("key") == '{"a": 1}'
        assert json.loads(path.read_text()) == {"key": '{"a": 1}'}

    @pytest.mark.asyncio
    async def test_missing_file_is_empty(self, tmp_path):
        store = JsonFileStore(tmp_path / "none.json")
        assert await store.all_items() == {}
        assert await store.get_item("x") is None

    @pytest.mark.asyncio
    async def test_remove_item(self, tmp_path):
        store = JsonFileStore(tmp_path / "s.json")
        await store.set_item("a", "1")
        await store.set_item("b", "2")
        await store.remove_item("a")
        assert await store.all_items() == {"b": "2"}

    @pytest.mark.asyncio
    async def test_corrupt_file_raises_store_error(self, tmp_path):
        path = tmp_path / "s.json"
        path.write_text("{not json")
        with pytest.raises(StoreError):
            await JsonFileStore(path).get_item("a")

    @pytest.mark.asyncio
    async def test_non_object_file_raises_store_error(self, tmp_path):
        path = tmp_path / "s.json"
        path.write_text("[1, 2]")
        with pytest.raises(StoreError):
            await JsonFileStore(path).all_items()

    @pytest.mark.asyncio
    async def test_no_temp_files_left_behind(self, tmp_path):
        store = JsonFileStore(tmp_path / "s.json")
        await store.set_item("a", "1")
        assert [p.name for p in tmp_path.iterdir()] == ["s.json"]

    @pytest.mark.asyncio
    async def test_write_replaces_corrupt_file(self, tmp_path, caplog):
        path = tmp_path / "s.json"
        path.write_text("{not json")
        store = JsonFileStore(path)

        await store.set_item("a", "1")

        assert json.loads(path.read_text()) == {"a": "1"}
        assert await store.get_item("a") == "1"
        assert "Discarding unreadable store" in caplog.text

    @pytest.mark.asyncio
    async def test_remove_replaces_non_object_file(self, tmp_path):
        path = tmp_path / "s.json"
        path.write_text("[1, 2]")
        store = JsonFileStore(path)

        await store.remove_item("a")
        await store.set_item("b", "2")

        assert await store.all_items() == {"b": "2"}
