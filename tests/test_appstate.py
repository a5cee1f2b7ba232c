"""
Unit tests for the app state store.
"""

import pytest

from messen.errors import AppStateNotFoundError, PersistenceError
from messen.store.appstate import AppStateStore


class TestAppStateStore:
    @pytest.mark.asyncio
    async def test_save_then_load(self, store):
        state = [{"key": "c_user", "value": "42"}, {"key": "xs", "value": "secret"}]
        await store.save(state)
        assert store.exists()
        assert await store.load() == state

    @pytest.mark.asyncio
    async def test_save_overwrites_previous_state(self, store):
        await store.save([{"key": "old"}])
        await store.save([{"key": "new"}])
        assert await store.load() == [{"key": "new"}]

    @pytest.mark.asyncio
    async def test_save_creates_parent_directory(self, tmp_path):
        store = AppStateStore(tmp_path / "nested" / "dir" / "appstate.json")
        await store.save({"ok": True})
        assert store.path.exists()

    @pytest.mark.asyncio
    async def test_load_missing_file(self, store):
        with pytest.raises(AppStateNotFoundError):
            await store.load()

    @pytest.mark.asyncio
    async def test_load_corrupt_file(self, store):
        store.path.write_text("{not json", encoding="utf-8")
        with pytest.raises(AppStateNotFoundError):
            await store.load()

    @pytest.mark.asyncio
    async def test_missing_state_is_a_persistence_error(self, store):
        with pytest.raises(PersistenceError):
            await store.load()

    @pytest.mark.asyncio
    async def test_clear_removes_file(self, store):
        await store.save([1, 2, 3])
        await store.clear()
        assert not store.exists()

    @pytest.mark.asyncio
    async def test_clear_without_file_is_noop(self, store):
        await store.clear()
        assert not store.exists()

    @pytest.mark.asyncio
    async def test_save_unserializable_state(self, store):
        with pytest.raises(PersistenceError):
            await store.save({"handle": object()})
