"""Storage configuration model."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class StorageBackendType(str, Enum):
    LOCAL = "local"
    MEMORY = "memory"


class StorageConfig(BaseModel):
    """Configuration for the blob store.

    Attributes:
        backend: Which adapter to build.
        root: Root directory for the local backend.
        public_base_url: Prefix for direct object URLs, if objects are served
            by something in front of the store.
    """

    backend: StorageBackendType = Field(default=StorageBackendType.LOCAL, description="Storage adapter")
    root: str = Field(default="./data/assets", description="Local storage root directory")
    public_base_url: str | None = Field(default=None, description="Public URL prefix for stored objects")
