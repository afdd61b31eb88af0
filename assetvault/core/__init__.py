"""Asset core: lifecycle manager and its security primitives.

Examples:
    >>> from assetvault.core import AssetManager, UploadInput
    >>> manager = AssetManager(storage=storage, repository=repository)
    >>> record = await manager.upload(UploadInput(...))
"""

from assetvault.core.errors import (
    AssetError,
    DuplicateAssetError,
    InvalidRequestError,
    InvalidSignatureError,
    RateLimitExceededError,
    StorageObjectNotFoundError,
    UploadErrorCode,
    UploadValidationError,
)
from assetvault.core.manager import AssetManager, UploadPolicy, can_access
from assetvault.core.models import (
    AssetFile,
    AssetRecord,
    AssetVisibility,
    DeleteStatus,
    FileResult,
    FileStatus,
    PrivateAssetMetadata,
    PublicAssetMetadata,
    StoredFile,
    StoredObject,
    UploadInput,
)
from assetvault.core.naming import (
    NormalizedName,
    NormalizeMode,
    SanitizeReason,
    normalize_display_name,
)
from assetvault.core.ports import AssetCache, AssetRepository, StoragePort
from assetvault.core.rate_limiter import RateLimitCategory, RateLimiter, RateLimitPolicy
from assetvault.core.signed_url import SignedLink, SignedUrlService

__all__ = [
    "AssetCache",
    "AssetError",
    "AssetFile",
    "AssetManager",
    "AssetRecord",
    "AssetRepository",
    "AssetVisibility",
    "DeleteStatus",
    "DuplicateAssetError",
    "FileResult",
    "FileStatus",
    "InvalidRequestError",
    "InvalidSignatureError",
    "NormalizeMode",
    "NormalizedName",
    "PrivateAssetMetadata",
    "PublicAssetMetadata",
    "RateLimitCategory",
    "RateLimitExceededError",
    "RateLimitPolicy",
    "RateLimiter",
    "SanitizeReason",
    "SignedLink",
    "SignedUrlService",
    "StorageObjectNotFoundError",
    "StoragePort",
    "StoredFile",
    "StoredObject",
    "UploadErrorCode",
    "UploadInput",
    "UploadPolicy",
    "UploadValidationError",
    "can_access",
    "normalize_display_name",
]
