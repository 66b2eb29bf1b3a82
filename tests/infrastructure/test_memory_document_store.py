"""
Tests for the In-Memory Document Store
"""
import pytest

from poetry_console.infrastructure.memory.document_store import MemoryDocumentStore
from poetry_console.ports.document_store_port import Collection


class TestMemoryDocumentStore:
    """Tests for MemoryDocumentStore"""

    @pytest.mark.asyncio
    async def test_seed_and_count(self, memory_store):
        assert await memory_store.count(Collection.POEMS) == 5
        assert await memory_store.count(Collection.USERS) == 3
        assert await memory_store.count(Collection.COMMENTS) == 5
        assert await memory_store.count(Collection.POEM_REQUESTS) == 2

    @pytest.mark.asyncio
    async def test_list_all_keeps_insertion_order(self, memory_store):
        poems = await memory_store.list_all(Collection.POEMS)
        assert [p["id"] for p in poems] == ["p1", "p2", "p3", "p4", "p5"]

    @pytest.mark.asyncio
    async def test_collection_name_is_accepted(self, memory_store):
        assert await memory_store.count("poemRequests") == 2

    @pytest.mark.asyncio
    async def test_reads_are_copies(self, memory_store):
        poems = await memory_store.list_all(Collection.POEMS)
        poems[0]["title"] = "Changed"

        again = await memory_store.get(Collection.POEMS, "p1")
        assert again["title"] == "Morning Light"

    @pytest.mark.asyncio
    async def test_insert_generates_id(self):
        store = MemoryDocumentStore()
        stored = await store.insert(Collection.COMMENTS, {"content": "hi"})

        assert stored["id"].startswith("mem_")
        assert await store.get(Collection.COMMENTS, stored["id"]) == stored

    @pytest.mark.asyncio
    async def test_update_merges_fields(self, memory_store):
        updated = await memory_store.update(
            Collection.COMMENTS, "c1", {"adminReply": "Thank you", "id": "other"}
        )

        assert updated["id"] == "c1"
        assert updated["adminReply"] == "Thank you"
        assert updated["content"] == "Lovely imagery"

    @pytest.mark.asyncio
    async def test_update_missing(self, memory_store):
        assert await memory_store.update(Collection.COMMENTS, "nope", {"x": 1}) is None

    @pytest.mark.asyncio
    async def test_delete(self, memory_store):
        assert await memory_store.delete(Collection.POEMS, "p5") is True
        assert await memory_store.delete(Collection.POEMS, "p5") is False
        assert await memory_store.count(Collection.POEMS) == 4

    @pytest.mark.asyncio
    async def test_clear(self, memory_store):
        await memory_store.clear()
        for collection in Collection:
            assert await memory_store.count(collection) == 0


class TestSeedFile:
    """Tests for loading the memory store from a seed file"""

    SEED = (
        "poems:\n"
        "  - id: p1\n"
        "    slug: morning-light\n"
        "    title: Morning Light\n"
        "    datePosted: '2024-05-15T10:05:00Z'\n"
        "users:\n"
        "  - id: u1\n"
        "    name: Alice\n"
        "comments: []\n"
        "drafts:\n"
        "  - id: d1\n"
    )

    @pytest.mark.asyncio
    async def test_from_file(self, tmp_path):
        path = tmp_path / "seed.yaml"
        path.write_text(self.SEED)

        store = MemoryDocumentStore.from_file(path)

        assert await store.count(Collection.POEMS) == 1
        assert await store.count(Collection.USERS) == 1
        assert await store.count(Collection.COMMENTS) == 0
        poem = await store.get(Collection.POEMS, "p1")
        assert poem["slug"] == "morning-light"

    @pytest.mark.asyncio
    async def test_json_seed_file(self, tmp_path):
        path = tmp_path / "seed.json"
        path.write_text('{"poemRequests": [{"id": "r1", "title": "Rain"}]}')

        store = MemoryDocumentStore.from_file(path)

        request = await store.get(Collection.POEM_REQUESTS, "r1")
        assert request["title"] == "Rain"

    def test_non_mapping_is_rejected(self, tmp_path):
        path = tmp_path / "seed.yaml"
        path.write_text("- just\n- a list\n")

        with pytest.raises(ValueError):
            MemoryDocumentStore.from_file(path)

    @pytest.mark.asyncio
    async def test_app_store_uses_seed_file(self, tmp_path, app_settings):
        from poetry_console.main import build_document_store

        path = tmp_path / "seed.yaml"
        path.write_text(self.SEED)
        app_settings.store.seed_file = str(path)

        store = await build_document_store(app_settings)

        assert await store.count(Collection.POEMS) == 1

    @pytest.mark.asyncio
    async def test_app_store_without_seed_file_is_empty(self, app_settings):
        from poetry_console.main import build_document_store

        store = await build_document_store(app_settings)

        assert await store.count(Collection.POEMS) == 0
