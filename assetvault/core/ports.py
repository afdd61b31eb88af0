"""Abstract collaborators consumed by the asset manager.

Concrete adapters live in ``assetvault.storage``, ``assetvault.repository``
and ``assetvault.cache``. All methods are coroutines; the manager suspends
only at these boundaries.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from assetvault.core.models import AssetRecord, StoredFile, StoredObject


class StoragePort(ABC):
    """Blob store for asset bytes."""

    @abstractmethod
    async def save(
        self,
        *,
        buffer: bytes,
        display_name: str,
        mime_type: str,
    ) -> StoredObject:
        """Write bytes and return their locator.

        Args:
            buffer: Payload to store.
            display_name: Sanitized name (adapters may use it for hints only).
            mime_type: Validated content type.

        Returns:
            StoredObject with a non-empty ``storage_path``.
        """

    @abstractmethod
    async def get(self, storage_path: str) -> StoredFile | None:
        """Read bytes back.

        Returns:
            StoredFile, or None when nothing is stored at the path. Adapters
            may raise ``StorageObjectNotFoundError`` instead of returning None.
        """

    @abstractmethod
    async def delete(self, storage_path: str) -> None:
        """Delete bytes. Deleting an absent path must not raise."""


class AssetRepository(ABC):
    """Durable metadata store."""

    @abstractmethod
    async def create(self, record: AssetRecord) -> AssetRecord:
        """Persist a new record.

        Raises:
            DuplicateAssetError: If a record with the same id exists.
        """

    @abstractmethod
    async def find_by_id(self, asset_id: str) -> AssetRecord | None:
        """Return the record, or None if absent."""

    @abstractmethod
    async def delete_by_id(self, asset_id: str) -> None:
        """Remove the record. Absent ids are ignored."""

    async def ping(self) -> bool:
        """Report whether the backing store is reachable."""
        return True


class AssetCache(ABC):
    """Ephemeral mirror of repository rows keyed by id.

    The manager catches and logs every exception raised here.
    """

    @abstractmethod
    async def get(self, asset_id: str) -> AssetRecord | None:
        ...

    @abstractmethod
    async def set(self, record: AssetRecord) -> None:
        ...

    @abstractmethod
    async def delete(self, asset_id: str) -> None:
        ...
