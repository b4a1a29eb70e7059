# tests/unit/cache/test_unit_file_store.py — v1
"""Tests for cache/file_store.py — atomic, content-addressed file store."""

from __future__ import annotations

import asyncio

import pytest

from bodyforge.cache.file_store import FileCacheStore, atomic_write_text

KEY_A = "a" * 64
KEY_B = "b" * 64


@pytest.fixture
def store(tmp_path):
    return FileCacheStore(cache_root=tmp_path / "cache")


class TestFileCacheStore:
    def test_creates_root(self, tmp_path):
        FileCacheStore(cache_root=tmp_path / "x" / "y")
        assert (tmp_path / "x" / "y").is_dir()

    @pytest.mark.asyncio
    async def test_store_and_lookup(self, store):
        await store.store(KEY_A, "class A:\n    pass\n")
        assert await store.lookup(KEY_A) == "class A:\n    pass\n"

    @pytest.mark.asyncio
    async def test_lookup_missing_is_none(self, store):
        assert await store.lookup(KEY_A) is None

    @pytest.mark.asyncio
    async def test_entry_layout(self, store):
        await store.store(KEY_A, "x = 1\n")
        assert (store.root / f"{KEY_A}.py").read_text(encoding="utf-8") == "x = 1\n"

    @pytest.mark.asyncio
    async def test_last_writer_wins(self, store):
        await store.store(KEY_A, "first\n")
        await store.store(KEY_A, "second\n")
        assert await store.lookup(KEY_A) == "second\n"

    @pytest.mark.asyncio
    async def test_no_temp_files_left(self, store):
        await store.store(KEY_A, "x = 1\n")
        assert [p.name for p in store.root.iterdir()] == [f"{KEY_A}.py"]

    @pytest.mark.asyncio
    async def test_delete(self, store):
        await store.store(KEY_A, "x = 1\n")
        await store.delete(KEY_A)
        await store.delete(KEY_A)
        assert await store.lookup(KEY_A) is None

    @pytest.mark.asyncio
    async def test_list_keys_skips_foreign_files(self, store):
        await store.store(KEY_B, "b\n")
        await store.store(KEY_A, "a\n")
        (store.root / "notes.py").write_text("x", encoding="utf-8")
        (store.root / f".{KEY_A}.py.123.tmp").write_text("partial", encoding="utf-8")
        assert await store.list_keys() == [KEY_A, KEY_B]

    @pytest.mark.asyncio
    async def test_clear(self, store):
        await store.store(KEY_A, "a\n")
        await store.store(KEY_B, "b\n")
        assert await store.clear() == 2
        assert await store.list_keys() == []

    @pytest.mark.asyncio
    async def test_rejects_invalid_key(self, store):
        with pytest.raises(ValueError):
            await store.store("../escape", "x")

    @pytest.mark.asyncio
    async def test_concurrent_distinct_keys(self, store):
        keys = [f"{i:064x}" for i in range(20)]
        await asyncio.gather(*(store.store(k, f"v{k}\n") for k in keys))
        results = await asyncio.gather(*(store.lookup(k) for k in keys))
        assert results == [f"v{k}\n" for k in keys]

    @pytest.mark.asyncio
    async def test_concurrent_same_key_leaves_complete_entry(self, store):
        contents = [f"content-{i}\n" * 100 for i in range(10)]
        await asyncio.gather(
            *(asyncio.to_thread(atomic_write_text, store.entry_path(KEY_A), c) for c in contents)
        )
        assert await store.lookup(KEY_A) in contents
        assert await store.list_keys() == [KEY_A]


class TestAtomicWriteText:
    def test_failed_write_keeps_previous(self, tmp_path, monkeypatch):
        target = tmp_path / "entry.py"
        atomic_write_text(target, "old\n")

        def boom(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr("bodyforge.cache.file_store.os.replace", boom)
        with pytest.raises(OSError, match="disk full"):
            atomic_write_text(target, "new\n")
        assert target.read_text(encoding="utf-8") == "old\n"
        assert [p.name for p in tmp_path.iterdir()] == ["entry.py"]
