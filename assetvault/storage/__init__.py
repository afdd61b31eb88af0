"""Blob storage adapters.

Examples:
    >>> from assetvault.storage import StorageConfig, create_storage
    >>> storage = create_storage(StorageConfig(root="./data/assets"))
    >>> stored = await storage.save(buffer=data, display_name="a.png", mime_type="image/png")
"""

from assetvault.core.ports import StoragePort
from assetvault.storage.config import StorageBackendType, StorageConfig
from assetvault.storage.local import LocalStorage
from assetvault.storage.memory import InMemoryStorage
from assetvault.storage.naming import extension_to_mime, generate_object_key, mime_to_extension


def create_storage(config: StorageConfig) -> StoragePort:
    """Build the storage adapter selected by ``config.backend``."""
    if config.backend == StorageBackendType.MEMORY:
        return InMemoryStorage()
    return LocalStorage(root=config.root, public_base_url=config.public_base_url)


__all__ = [
    "InMemoryStorage",
    "LocalStorage",
    "StorageBackendType",
    "StorageConfig",
    "create_storage",
    "extension_to_mime",
    "generate_object_key",
    "mime_to_extension",
]
