"""Local filesystem storage adapter using pathlib.

File I/O runs in a worker thread so the event loop is never blocked.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from assetvault.core.errors import StorageObjectNotFoundError
from assetvault.core.models import StoredFile, StoredObject
from assetvault.core.ports import StoragePort
from assetvault.storage.naming import extension_to_mime, generate_object_key

logger = logging.getLogger(__name__)


class LocalStorage(StoragePort):
    """Stores each asset as one file under ``root``.

    Attributes:
        root: Resolved storage root.
        public_base_url: Optional prefix for ``StoredObject.public_url``.
    """

    def __init__(self, root: str | Path, public_base_url: str | None = None) -> None:
        self.root = Path(root).resolve()
        self.public_base_url = public_base_url.rstrip("/") if public_base_url else None

    def _resolve(self, storage_path: str) -> Path:
        """Map a key to a path inside root. Keys escaping root are treated as absent."""
        path = (self.root / storage_path).resolve()
        if not path.is_relative_to(self.root):
            raise StorageObjectNotFoundError(storage_path)
        return path

    async def save(self, *, buffer: bytes, display_name: str, mime_type: str) -> StoredObject:
        key = generate_object_key(mime_type)
        path = self._resolve(key)

        def _write() -> None:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(buffer)

        await asyncio.to_thread(_write)
        logger.debug(f"Object written: {key} ({len(buffer)} bytes)")

        public_url = f"{self.public_base_url}/{key}" if self.public_base_url else None
        return StoredObject(storage_path=key, public_url=public_url)

    async def get(self, storage_path: str) -> StoredFile | None:
        path = self._resolve(storage_path)
        try:
            data = await asyncio.to_thread(path.read_bytes)
        except FileNotFoundError:
            raise StorageObjectNotFoundError(storage_path)
        return StoredFile(buffer=data, mime_type=extension_to_mime(storage_path))

    async def delete(self, storage_path: str) -> None:
        try:
            path = self._resolve(storage_path)
        except StorageObjectNotFoundError:
            return
        await asyncio.to_thread(path.unlink, missing_ok=True)
        logger.debug(f"Object deleted: {storage_path}")

    async def exists(self, storage_path: str) -> bool:
        try:
            path = self._resolve(storage_path)
        except StorageObjectNotFoundError:
            return False
        return await asyncio.to_thread(path.exists)
