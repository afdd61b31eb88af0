"""Tests for assetvault.storage.local module.

Covers:
    - save/get/delete round trip on a tmp_path root
    - opaque keys (client names never reach the filesystem)
    - missing objects and keys escaping the root
"""

import re
from datetime import datetime, timezone

import pytest

from assetvault.core.errors import StorageObjectNotFoundError
from assetvault.storage import (
    InMemoryStorage,
    LocalStorage,
    StorageBackendType,
    StorageConfig,
    create_storage,
    extension_to_mime,
    generate_object_key,
    mime_to_extension,
)


@pytest.fixture
def storage(tmp_path):
    return LocalStorage(root=tmp_path, public_base_url="https://cdn.example.com/assets/")


@pytest.mark.fast
class TestLocalStorage:
    """Tests for LocalStorage."""

    @pytest.mark.asyncio
    async def test_save_writes_file(self, storage, tmp_path):
        stored = await storage.save(buffer=b"data", display_name="a.png", mime_type="image/png")

        assert re.fullmatch(r"\d{4}/\d{2}/[0-9a-f]{32}\.png", stored.storage_path)
        assert (tmp_path / stored.storage_path).read_bytes() == b"data"

    @pytest.mark.asyncio
    async def test_public_url_uses_base(self, storage):
        stored = await storage.save(buffer=b"data", display_name="a.png", mime_type="image/png")
        assert stored.public_url == f"https://cdn.example.com/assets/{stored.storage_path}"

    @pytest.mark.asyncio
    async def test_no_public_url_without_base(self, tmp_path):
        storage = LocalStorage(root=tmp_path)
        stored = await storage.save(buffer=b"data", display_name="a.png", mime_type="image/png")
        assert stored.public_url is None

    @pytest.mark.asyncio
    async def test_display_name_not_used_in_key(self, storage):
        stored = await storage.save(
            buffer=b"data", display_name="../../etc/passwd", mime_type="image/png"
        )
        assert "passwd" not in stored.storage_path
        assert ".." not in stored.storage_path

    @pytest.mark.asyncio
    async def test_get_returns_bytes_and_mime(self, storage):
        stored = await storage.save(buffer=b"jpeg", display_name="a.jpg", mime_type="image/jpeg")

        result = await storage.get(stored.storage_path)

        assert result.buffer == b"jpeg"
        assert result.mime_type == "image/jpeg"

    @pytest.mark.asyncio
    async def test_get_missing_raises_not_found(self, storage):
        with pytest.raises(StorageObjectNotFoundError):
            await storage.get("2026/10/missing.png")

    @pytest.mark.asyncio
    async def test_get_outside_root_raises_not_found(self, storage):
        with pytest.raises(StorageObjectNotFoundError):
            await storage.get("../../etc/passwd")

    @pytest.mark.asyncio
    async def test_delete_removes_file(self, storage, tmp_path):
        stored = await storage.save(buffer=b"data", display_name="a.png", mime_type="image/png")

        await storage.delete(stored.storage_path)

        assert not (tmp_path / stored.storage_path).exists()
        assert await storage.exists(stored.storage_path) is False

    @pytest.mark.asyncio
    async def test_delete_is_idempotent(self, storage):
        await storage.delete("2026/10/missing.png")
        await storage.delete("../outside.png")


@pytest.mark.fast
class TestCreateStorage:
    """Tests for create_storage()."""

    def test_local_backend(self, tmp_path):
        storage = create_storage(StorageConfig(backend=StorageBackendType.LOCAL, root=str(tmp_path)))
        assert isinstance(storage, LocalStorage)
        assert storage.root == tmp_path.resolve()

    def test_memory_backend(self):
        storage = create_storage(StorageConfig(backend=StorageBackendType.MEMORY))
        assert isinstance(storage, InMemoryStorage)


@pytest.mark.fast
class TestObjectKeys:
    """Tests for assetvault.storage.naming."""

    def test_generate_object_key_format(self):
        key = generate_object_key(
            "image/webp",
            date=datetime(2026, 3, 9, tzinfo=timezone.utc),
            uuid_str="abc123",
        )
        assert key == "2026/03/abc123.webp"

    def test_mime_extension_mapping(self):
        assert mime_to_extension("image/jpeg") == ".jpg"
        assert mime_to_extension("application/x-unknown-thing") == ".bin"
        assert extension_to_mime("2026/03/abc.png") == "image/png"
        assert extension_to_mime("2026/03/abc.unknownext") == "application/octet-stream"
