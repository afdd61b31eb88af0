"""Domain models for stored assets.

Examples:
    >>> from assetvault.core.models import AssetRecord, AssetVisibility
    >>> record.visibility
    <AssetVisibility.PRIVATE: 'private'>
    >>> PublicAssetMetadata.from_record(record).model_dump(by_alias=True)
    {'id': '...', 'displayName': 'photo.png', 'mimeType': 'image/png', 'size': 12, 'createdAt': ...}

Tests:
    - tests/unit/test_core/test_models.py
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

MAX_DISPLAY_NAME_LENGTH = 255


class AssetVisibility(str, Enum):
    """Access policy on an asset.

    - PRIVATE: bytes and full metadata readable by the owner only
    - PUBLIC: readable by anyone, including signed-link bearers
    """

    PRIVATE = "private"
    PUBLIC = "public"


class _AssetModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class AssetRecord(_AssetModel):
    """Metadata row for a stored asset.

    Attributes:
        id: Server-generated unique id (immutable)
        display_name: Sanitized name, safe for headers and logs
        mime_type: Content type accepted by the allow-list
        size: Byte length of the stored payload
        storage_path: Opaque blob-store locator
        public_url: Optional direct URL provided by the storage backend
        owner_id: Opaque caller-supplied owner identity
        visibility: private (default) or public
        created_at: Creation timestamp
        updated_at: Last update timestamp
    """

    id: str
    display_name: str = Field(max_length=MAX_DISPLAY_NAME_LENGTH)
    mime_type: str = Field(max_length=100)
    size: int = Field(gt=0)
    storage_path: str = Field(min_length=1, max_length=512)
    public_url: str | None = None
    owner_id: str | None = None
    visibility: AssetVisibility = AssetVisibility.PRIVATE
    created_at: datetime
    updated_at: datetime

    @property
    def is_public(self) -> bool:
        return self.visibility == AssetVisibility.PUBLIC


class PublicAssetMetadata(_AssetModel):
    """Redacted projection returned to requesters without visibility rights."""

    id: str
    display_name: str
    mime_type: str
    size: int
    created_at: datetime

    @classmethod
    def from_record(cls, record: AssetRecord) -> "PublicAssetMetadata":
        return cls(
            id=record.id,
            display_name=record.display_name,
            mime_type=record.mime_type,
            size=record.size,
            created_at=record.created_at,
        )


class PrivateAssetMetadata(PublicAssetMetadata):
    """Full projection returned to the owner, or to anyone for public assets."""

    owner_id: str | None = None
    visibility: AssetVisibility
    updated_at: datetime

    @classmethod
    def from_record(cls, record: AssetRecord) -> "PrivateAssetMetadata":
        return cls(
            id=record.id,
            display_name=record.display_name,
            mime_type=record.mime_type,
            size=record.size,
            created_at=record.created_at,
            owner_id=record.owner_id,
            visibility=record.visibility,
            updated_at=record.updated_at,
        )


@dataclass(slots=True)
class UploadInput:
    """Caller-supplied upload request.

    Every field is untrusted; ``AssetManager.upload`` validates all of them.
    """

    buffer: bytes | None
    display_name: str | None
    mime_type: str | None
    size: int | None
    owner_id: str | None = None
    visibility: AssetVisibility | None = None


@dataclass(frozen=True, slots=True)
class StoredObject:
    """Result of writing bytes to the blob store."""

    storage_path: str
    public_url: str | None = None


@dataclass(frozen=True, slots=True)
class StoredFile:
    """Bytes read back from the blob store."""

    buffer: bytes
    mime_type: str


class FileStatus(str, Enum):
    OK = "ok"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"


@dataclass(frozen=True, slots=True)
class AssetFile:
    buffer: bytes
    display_name: str
    mime_type: str


@dataclass(frozen=True, slots=True)
class FileResult:
    """Tagged outcome of ``AssetManager.get_file_by_id``.

    ``file`` is set only when ``status`` is ``FileStatus.OK``.
    """

    status: FileStatus
    file: AssetFile | None = None

    @classmethod
    def ok(cls, file: AssetFile) -> "FileResult":
        return cls(status=FileStatus.OK, file=file)

    @classmethod
    def not_found(cls) -> "FileResult":
        return cls(status=FileStatus.NOT_FOUND)

    @classmethod
    def forbidden(cls) -> "FileResult":
        return cls(status=FileStatus.FORBIDDEN)


class DeleteStatus(str, Enum):
    DELETED = "deleted"
    NOT_FOUND = "not_found"
