"""Asset lifecycle manager.

Sole authority over asset state. Sequences byte storage and metadata
persistence so the two never diverge, and enforces the private/public
visibility invariant on every read path.

Lifecycle per id:

    nonexistent -> (upload) -> stored-pending-metadata
                -> (metadata committed) -> active -> (delete) -> nonexistent

The pending state is never observable: if the metadata write fails, the
just-written bytes are deleted before the original error propagates.

Examples:
    >>> manager = AssetManager(storage, repository, cache=cache, logger=logger)
    >>> record = await manager.upload(UploadInput(buffer=data, display_name="a.png",
    ...                                          mime_type="image/png", size=len(data)))
    >>> result = await manager.get_file_by_id(record.id, requester_owner_id=None)

Tests:
    - tests/unit/test_core/test_manager.py
"""

from __future__ import annotations

import logging
import uuid
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Callable

from assetvault.core.errors import (
    StorageObjectNotFoundError,
    UploadErrorCode,
    UploadValidationError,
)
from assetvault.core.models import (
    AssetFile,
    AssetRecord,
    AssetVisibility,
    DeleteStatus,
    FileResult,
    PrivateAssetMetadata,
    PublicAssetMetadata,
    StoredObject,
    UploadInput,
)
from assetvault.core.naming import NormalizeMode, normalize_display_name
from assetvault.core.ports import AssetCache, AssetRepository, StoragePort

_fallback_logger = logging.getLogger(__name__)

DEFAULT_ALLOWED_MIME_TYPES = frozenset({"image/png", "image/jpeg", "image/webp"})
DEFAULT_MAX_FILE_SIZE_BYTES = 10 * 1024 * 1024
DEFAULT_FALLBACK_EXTENSION = ".bin"


@dataclass(frozen=True)
class UploadPolicy:
    """Server-held upload limits (process-global)."""

    allowed_mime_types: frozenset[str] = DEFAULT_ALLOWED_MIME_TYPES
    max_file_size_bytes: int = DEFAULT_MAX_FILE_SIZE_BYTES
    fallback_extension: str = DEFAULT_FALLBACK_EXTENSION


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_asset_id() -> str:
    return str(uuid.uuid4())


def can_access(record: AssetRecord, requester_owner_id: str | None) -> bool:
    """Return True if the requester may see the full asset.

    Public assets are open to everyone. Private assets require a requester
    identity equal to a stored owner id; a missing identity never matches.
    """
    if record.visibility == AssetVisibility.PUBLIC:
        return True
    return (
        requester_owner_id is not None
        and record.owner_id is not None
        and requester_owner_id == record.owner_id
    )


@dataclass
class AssetManager:
    """Orchestrates storage, repository and cache for asset operations.

    Attributes:
        storage: Blob store port.
        repository: Metadata store port.
        cache: Optional cache port; failures only affect hit rate.
        logger: Optional logger; when None, nothing is logged.
        policy: Upload limits.
    """

    storage: StoragePort
    repository: AssetRepository
    cache: AssetCache | None = None
    logger: logging.Logger | None = None
    policy: UploadPolicy = field(default_factory=UploadPolicy)
    id_factory: Callable[[], str] = _new_asset_id
    clock: Callable[[], datetime] = _utcnow

    # ---------------------------------------------------------------
    # Logging
    # ---------------------------------------------------------------

    def _log(self, level: int, message: str, **fields: Any) -> None:
        if self.logger is None:
            return
        try:
            self.logger.log(level, message, extra=fields)
        except Exception:
            _fallback_logger.debug("Asset logger failed", exc_info=True)

    # ---------------------------------------------------------------
    # Cache helpers (best effort)
    # ---------------------------------------------------------------

    async def _cache_get(self, asset_id: str) -> AssetRecord | None:
        if self.cache is None:
            return None
        try:
            return await self.cache.get(asset_id)
        except Exception as e:
            self._log(
                logging.WARNING,
                "Cache read failure",
                event="CACHE_FAIL",
                asset_id=asset_id,
                operation="get",
                error=str(e),
            )
            return None

    async def _cache_set(self, record: AssetRecord) -> None:
        if self.cache is None:
            return
        try:
            await self.cache.set(record)
        except Exception as e:
            self._log(
                logging.WARNING,
                "Cache write failure",
                event="CACHE_FAIL",
                asset_id=record.id,
                operation="set",
                error=str(e),
            )

    async def _cache_delete(self, asset_id: str) -> None:
        if self.cache is None:
            return
        try:
            await self.cache.delete(asset_id)
        except Exception as e:
            self._log(
                logging.WARNING,
                "Cache delete failure",
                event="CACHE_FAIL",
                asset_id=asset_id,
                operation="delete",
                error=str(e),
            )

    # ---------------------------------------------------------------
    # Upload
    # ---------------------------------------------------------------

    def _validate_upload(self, upload: UploadInput) -> None:
        """Reject bad input before any side effect.

        Raises:
            UploadValidationError: On the first failing rule.
        """
        if not upload.buffer:
            raise UploadValidationError(
                "Asset buffer is required", UploadErrorCode.MISSING_ASSET_BUFFER
            )

        if not upload.mime_type or upload.mime_type not in self.policy.allowed_mime_types:
            raise UploadValidationError(
                "MIME type not allowed", UploadErrorCode.FILE_TYPE_RESTRICTED
            )

        size = upload.size
        if not isinstance(size, int) or isinstance(size, bool) or size <= 0:
            raise UploadValidationError("Invalid file size", UploadErrorCode.INVALID_FILE_SIZE)
        if size != len(upload.buffer):
            raise UploadValidationError("File size mismatch", UploadErrorCode.FILE_SIZE_MISMATCH)
        if size > self.policy.max_file_size_bytes:
            raise UploadValidationError(
                "File exceeds maximum size permitted", UploadErrorCode.FILE_TOO_LARGE
            )

        if upload.owner_id is not None:
            if not isinstance(upload.owner_id, str) or not upload.owner_id.strip():
                raise UploadValidationError(
                    "ownerId must be a non-empty string if provided",
                    UploadErrorCode.INVALID_OWNER_ID,
                )

    @asynccontextmanager
    async def _staged_bytes(
        self,
        asset_id: str,
        *,
        buffer: bytes,
        display_name: str,
        mime_type: str,
    ) -> AsyncIterator[StoredObject]:
        """Write bytes, releasing them if the enclosed block fails or is cancelled."""
        stored = await self.storage.save(
            buffer=buffer,
            display_name=display_name,
            mime_type=mime_type,
        )
        try:
            yield stored
        except BaseException:
            # Cancellation must release the bytes too.
            try:
                await self.storage.delete(stored.storage_path)
            except Exception as cleanup_error:
                self._log(
                    logging.ERROR,
                    "Failed to roll back stored bytes after metadata failure",
                    event="ROLLBACK_FAIL",
                    asset_id=asset_id,
                    storage_path=stored.storage_path,
                    error=str(cleanup_error),
                )
            raise

    async def upload(self, upload: UploadInput) -> AssetRecord:
        """Store bytes and metadata for a new asset.

        Args:
            upload: Untrusted upload request.

        Returns:
            The persisted AssetRecord.

        Raises:
            UploadValidationError: Input fault; nothing was written.
            Exception: Storage/repository fault, re-raised after any stored
                bytes were deleted.
        """
        try:
            self._validate_upload(upload)
        except UploadValidationError as e:
            self._log(
                logging.ERROR,
                "Asset Upload Rejected",
                event="UPLOAD_FAIL",
                reason=e.code,
                display_name=upload.display_name,
                owner_id=upload.owner_id,
                error=e.message,
            )
            raise

        asset_id = self.id_factory()
        now = self.clock()
        visibility = upload.visibility or AssetVisibility.PRIVATE

        normalized = normalize_display_name(
            upload.display_name,
            mode=NormalizeMode.SANITIZE,
            fallback_extension=self.policy.fallback_extension,
        )
        if normalized.sanitized:
            self._log(
                logging.WARNING,
                "displayName sanitized",
                event="DISPLAY_NAME_SANITIZED",
                asset_id=asset_id,
                original=normalized.original,
                display_name=normalized.display_name,
                reason=normalized.reason.value if normalized.reason else None,
            )

        try:
            async with self._staged_bytes(
                asset_id,
                buffer=upload.buffer,
                display_name=normalized.display_name,
                mime_type=upload.mime_type,
            ) as stored:
                record = AssetRecord(
                    id=asset_id,
                    display_name=normalized.display_name,
                    mime_type=upload.mime_type,
                    size=upload.size,
                    storage_path=stored.storage_path,
                    public_url=stored.public_url,
                    owner_id=upload.owner_id,
                    visibility=visibility,
                    created_at=now,
                    updated_at=now,
                )
                saved = await self.repository.create(record)
        except Exception as e:
            self._log(
                logging.ERROR,
                "Asset Upload Failed",
                event="UPLOAD_FAIL",
                asset_id=asset_id,
                display_name=normalized.display_name,
                owner_id=upload.owner_id,
                error=str(e),
            )
            raise

        await self._cache_set(saved)

        self._log(
            logging.INFO,
            "Asset Upload Succeeded",
            event="UPLOAD_SUCCESS",
            asset_id=asset_id,
            display_name=saved.display_name,
            size=saved.size,
            owner_id=saved.owner_id,
            visibility=saved.visibility.value,
        )
        return saved

    # ---------------------------------------------------------------
    # Reads
    # ---------------------------------------------------------------

    async def get(self, asset_id: str) -> AssetRecord | None:
        """Return the record, cache first. None if absent everywhere."""
        cached = await self._cache_get(asset_id)
        if cached is not None:
            return cached

        record = await self.repository.find_by_id(asset_id)
        if record is not None:
            await self._cache_set(record)
        return record

    async def get_metadata_by_id(
        self,
        asset_id: str,
        requester_owner_id: str | None = None,
    ) -> PublicAssetMetadata | PrivateAssetMetadata | None:
        """Return metadata, redacted when the requester lacks visibility rights.

        Returns:
            None if absent; PublicAssetMetadata for a private asset the
            requester does not own; PrivateAssetMetadata otherwise.
        """
        record = await self.get(asset_id)
        if record is None:
            return None

        if not can_access(record, requester_owner_id):
            self._log(
                logging.INFO,
                "Private Metadata Redacted",
                event="METADATA_REDACTED",
                asset_id=asset_id,
                requester_owner_id=requester_owner_id,
                reason="visibility-invariant",
            )
            return PublicAssetMetadata.from_record(record)

        return PrivateAssetMetadata.from_record(record)

    async def get_file_by_id(
        self,
        asset_id: str,
        requester_owner_id: str | None = None,
    ) -> FileResult:
        """Return the asset bytes as a tagged result.

        Forbidden requests never touch storage. Missing bytes map to
        not_found; any other storage error propagates.
        """
        record = await self.get(asset_id)
        if record is None:
            self._log(
                logging.INFO,
                "File not found",
                event="FILE_GET_NOT_FOUND",
                asset_id=asset_id,
                reason="record-missing",
            )
            return FileResult.not_found()

        if not can_access(record, requester_owner_id):
            self._log(
                logging.WARNING,
                "File Access Restricted",
                event="FILE_GET_FORBIDDEN",
                asset_id=asset_id,
                requester_owner_id=requester_owner_id,
                reason="visibility-invariant",
            )
            return FileResult.forbidden()

        try:
            stored = await self.storage.get(record.storage_path)
        except (StorageObjectNotFoundError, FileNotFoundError) as e:
            self._log(
                logging.WARNING,
                "Asset File Not Found",
                event="FILE_GET_NOT_FOUND",
                asset_id=asset_id,
                reason="storage-missing",
                error=str(e),
            )
            return FileResult.not_found()

        if stored is None:
            self._log(
                logging.WARNING,
                "Asset File Not Found",
                event="FILE_GET_NOT_FOUND",
                asset_id=asset_id,
                reason="storage-missing",
            )
            return FileResult.not_found()

        self._log(
            logging.INFO,
            "File Retrieved",
            event="FILE_GET_SUCCESS",
            asset_id=asset_id,
            owner_id=record.owner_id,
            visibility=record.visibility.value,
        )
        return FileResult.ok(
            AssetFile(
                buffer=stored.buffer,
                display_name=record.display_name,
                mime_type=stored.mime_type or record.mime_type,
            )
        )

    # ---------------------------------------------------------------
    # Delete
    # ---------------------------------------------------------------

    async def delete(self, asset_id: str) -> DeleteStatus:
        """Remove bytes, metadata row and cache entry, in that order.

        The lookup goes to the repository, not the cache. No compensation
        is attempted on failure; storage and repository deletes are
        idempotent, so retrying completes a partial delete.
        """
        record = await self.repository.find_by_id(asset_id)
        if record is None:
            self._log(
                logging.INFO,
                "Record not found",
                event="DELETE_NOT_FOUND",
                asset_id=asset_id,
            )
            return DeleteStatus.NOT_FOUND

        try:
            await self.storage.delete(record.storage_path)
            await self.repository.delete_by_id(asset_id)
        except Exception as e:
            self._log(
                logging.ERROR,
                "Asset Delete Failed",
                event="DELETE_FAIL",
                asset_id=asset_id,
                error=str(e),
            )
            raise

        await self._cache_delete(asset_id)

        self._log(
            logging.INFO,
            "Successful Delete",
            event="DELETE_SUCCESS",
            asset_id=asset_id,
            owner_id=record.owner_id,
            visibility=record.visibility.value,
        )
        return DeleteStatus.DELETED
