"""In-memory storage adapter for tests and single-process development."""

from __future__ import annotations

from assetvault.core.models import StoredFile, StoredObject
from assetvault.core.ports import StoragePort
from assetvault.storage.naming import generate_object_key


class InMemoryStorage(StoragePort):
    """Keeps objects in a dict keyed by storage path."""

    def __init__(self) -> None:
        self.objects: dict[str, StoredFile] = {}

    async def save(self, *, buffer: bytes, display_name: str, mime_type: str) -> StoredObject:
        key = generate_object_key(mime_type)
        self.objects[key] = StoredFile(buffer=bytes(buffer), mime_type=mime_type)
        return StoredObject(storage_path=key)

    async def get(self, storage_path: str) -> StoredFile | None:
        return self.objects.get(storage_path)

    async def delete(self, storage_path: str) -> None:
        self.objects.pop(storage_path, None)
