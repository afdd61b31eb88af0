"""Error taxonomy for the asset core.

Two families of failure leave the core:

- Caller-input faults (``UploadValidationError``) raised synchronously by
  ``AssetManager.upload`` before any side effect happens.
- Infrastructure faults raised by the storage / repository adapters. The
  manager compensates where it can and re-raises them unchanged.

Access-control outcomes (forbidden, redacted metadata) are result variants,
not exceptions. ``status_code`` is only a hint for the transport layer.

Tests:
    - tests/unit/test_core/test_errors.py
"""

from __future__ import annotations

from enum import Enum


class UploadErrorCode(str, Enum):
    """Stable machine codes for rejected uploads."""

    MISSING_ASSET_BUFFER = "MISSING_ASSET_BUFFER"
    FILE_TYPE_RESTRICTED = "FILE_TYPE_RESTRICTED"
    INVALID_FILE_SIZE = "INVALID_FILE_SIZE"
    FILE_SIZE_MISMATCH = "FILE_SIZE_MISMATCH"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    INVALID_OWNER_ID = "INVALID_OWNER_ID"


class AssetError(Exception):
    """Base class for errors that carry a public message and code.

    Attributes:
        message: Human readable, safe to return to clients.
        code: Stable machine-readable code.
        status_code: Suggested HTTP status for the transport layer.
    """

    default_code = "ASSET_ERROR"
    default_status = 400

    def __init__(
        self,
        message: str,
        code: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.status_code = status_code or self.default_status

    def to_dict(self) -> dict[str, str]:
        return {"error": self.message, "code": self.code}


class UploadValidationError(AssetError):
    """An upload was rejected before anything was written."""

    def __init__(self, message: str, code: UploadErrorCode) -> None:
        super().__init__(message, code=code.value, status_code=400)
        self.error_code = code


class StorageObjectNotFoundError(AssetError):
    """The blob store has no bytes at the requested path."""

    default_code = "STORAGE_OBJECT_NOT_FOUND"
    default_status = 404

    def __init__(self, storage_path: str) -> None:
        super().__init__(f"Stored object not found: {storage_path}")
        self.storage_path = storage_path


class DuplicateAssetError(AssetError):
    """The repository already holds a record with this id."""

    default_code = "DUPLICATE_ASSET"
    default_status = 409

    def __init__(self, asset_id: str) -> None:
        super().__init__(f"Asset with id {asset_id} already exists")
        self.asset_id = asset_id


class RateLimitExceededError(AssetError):
    default_code = "RATE_LIMIT_EXCEEDED"
    default_status = 429

    def __init__(self, message: str = "Rate limit exceeded") -> None:
        super().__init__(message)


class InvalidSignatureError(AssetError):
    default_code = "INVALID_SIGNATURE"
    default_status = 403

    def __init__(self, message: str = "Invalid or expired signature") -> None:
        super().__init__(message)


class InvalidRequestError(AssetError):
    """Malformed request detected by the transport layer."""

    default_code = "BAD_REQUEST"
    default_status = 400


__all__ = [
    "AssetError",
    "DuplicateAssetError",
    "InvalidRequestError",
    "InvalidSignatureError",
    "RateLimitExceededError",
    "StorageObjectNotFoundError",
    "UploadErrorCode",
    "UploadValidationError",
]
