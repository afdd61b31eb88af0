"""Asset API endpoints.

Thin HTTP surface over ``AssetManager``. The owner id is read from the
owner header (``m1as-user-id`` by default) and treated as an opaque,
unauthenticated identity.

Endpoints:
    POST /api/v1/assets - Multipart upload (fields: file, visibility)
    POST /api/v1/assets/json - Base64 JSON upload (owner required)
    GET /api/v1/assets/{id} - Metadata (redacted for non-owners of private assets)
    GET /api/v1/assets/{id}/file - Asset bytes
    DELETE /api/v1/assets/{id} - Delete bytes and metadata
    POST /api/v1/assets/{id}/signed-url - Issue a signed delivery link
    GET /api/v1/assets/{id}/signed - Serve bytes for a valid signed link

Examples:
    >>> # Upload a public image
    >>> POST /api/v1/assets  (multipart: file=@photo.png, visibility=public)
    >>> GET /api/v1/assets/{id}/file

Tests:
    - tests/unit/test_api.py
"""

from __future__ import annotations

import base64
import binascii
import logging
import re
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from pydantic import BaseModel, ConfigDict, Field
from starlette.datastructures import UploadFile

from assetvault.api.deps import get_owner_id, get_services, rate_limit
from assetvault.container import AssetServices
from assetvault.core.errors import (
    AssetError,
    InvalidRequestError,
    InvalidSignatureError,
    UploadErrorCode,
    UploadValidationError,
)
from assetvault.core.models import (
    AssetFile,
    AssetRecord,
    AssetVisibility,
    DeleteStatus,
    FileStatus,
    PrivateAssetMetadata,
    PublicAssetMetadata,
    UploadInput,
)
from assetvault.core.rate_limiter import RateLimitCategory
from assetvault.mime import detect_mime_type

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/assets", tags=["assets"])

MULTIPART_FIELDS = frozenset({"file", "visibility"})
_BASE64_RE = re.compile(r"^[A-Za-z0-9+/]*={0,2}$")


# Request/Response Models


class JsonUploadRequest(BaseModel):
    """Base64 upload body.

    Attributes:
        filename: Client-supplied name (sanitized before storage)
        mime_type: Claimed content type (re-checked against the bytes)
        visibility: "public" or "private" (default)
        data: Base64-encoded file content
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    filename: str | None = Field(default=None, max_length=1024)
    mime_type: str | None = Field(default=None, alias="mimeType", max_length=100)
    visibility: AssetVisibility | None = None
    data: str = Field(min_length=1)


class AssetResponse(PrivateAssetMetadata):
    """Upload result. The storage path stays internal."""

    public_url: str | None = None

    @classmethod
    def from_record(cls, record: AssetRecord) -> "AssetResponse":
        return cls(
            **PrivateAssetMetadata.from_record(record).model_dump(),
            public_url=record.public_url,
        )


class DeleteResponse(BaseModel):
    deleted: bool
    reason: str | None = None


class SignedUrlResponse(BaseModel):
    url: str
    expires: int
    signature: str


# Helpers


def _file_response(file: AssetFile) -> Response:
    return Response(
        content=file.buffer,
        media_type=file.mime_type,
        headers={
            "Content-Disposition": f'inline; filename="{quote(file.display_name)}"',
            "X-Content-Type-Options": "nosniff",
        },
    )


async def _read_capped(upload: UploadFile, max_bytes: int) -> bytes:
    """Read an uploaded part, refusing anything over ``max_bytes``.

    The declared part size is checked first; at most ``max_bytes + 1`` bytes
    are ever read, so oversized payloads are never buffered whole.
    """
    if upload.size is not None and upload.size > max_bytes:
        raise _too_large()
    data = await upload.read(max_bytes + 1)
    if len(data) > max_bytes:
        raise _too_large()
    return data


def _too_large() -> UploadValidationError:
    return UploadValidationError(
        "File exceeds maximum size permitted", UploadErrorCode.FILE_TOO_LARGE
    )


async def _store(services: AssetServices, upload: UploadInput) -> AssetResponse:
    record = await services.manager.upload(upload)
    return AssetResponse.from_record(record)


# Endpoints


@router.post("", status_code=201, response_model=AssetResponse)
async def upload_asset(
    request: Request,
    owner_id: str | None = Depends(get_owner_id),
    services: AssetServices = Depends(get_services),
    _limit=Depends(rate_limit(RateLimitCategory.UPLOAD)),
) -> AssetResponse:
    """Upload a file from a multipart form.

    Only the ``file`` and ``visibility`` fields are accepted. The stored
    MIME type is detected from the bytes, never taken from the client.

    Raises:
        InvalidRequestError: Unexpected fields or missing file part
        UploadValidationError: Rejected by the upload policy
    """
    async with request.form(max_files=1, max_fields=len(MULTIPART_FIELDS)) as form:
        unexpected = sorted(set(form.keys()) - MULTIPART_FIELDS)
        if unexpected:
            raise InvalidRequestError(
                f"Unexpected form fields: {', '.join(unexpected)}",
                code="UNEXPECTED_FIELDS",
            )

        upload = form.get("file")
        if not isinstance(upload, UploadFile):
            raise InvalidRequestError("No file uploaded", code="MISSING_FILE")

        data = await _read_capped(upload, services.manager.policy.max_file_size_bytes)
        visibility = (
            AssetVisibility.PUBLIC
            if form.get("visibility") == AssetVisibility.PUBLIC.value
            else AssetVisibility.PRIVATE
        )

        return await _store(
            services,
            UploadInput(
                buffer=data,
                display_name=upload.filename,
                mime_type=detect_mime_type(data, upload.content_type),
                size=len(data),
                owner_id=owner_id,
                visibility=visibility,
            ),
        )


@router.post("/json", status_code=201, response_model=AssetResponse)
async def upload_asset_json(
    body: JsonUploadRequest,
    owner_id: str | None = Depends(get_owner_id),
    services: AssetServices = Depends(get_services),
    _limit=Depends(rate_limit(RateLimitCategory.UPLOAD)),
) -> AssetResponse:
    """Upload a base64-encoded file.

    Raises:
        HTTPException: 401 without an owner id
        InvalidRequestError: Malformed base64
        AssetError: 413 when the decoded payload is too large
    """
    if not owner_id:
        raise HTTPException(status_code=401, detail="Unauthorized")

    encoded = "".join(body.data.split())
    if not _BASE64_RE.match(encoded):
        raise InvalidRequestError("Invalid base64 data", code="INVALID_BASE64")
    try:
        data = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError):
        raise InvalidRequestError("Invalid base64 data", code="INVALID_BASE64")

    if len(data) > services.settings.MAX_JSON_UPLOAD_BYTES:
        raise AssetError("Payload too large", code="PAYLOAD_TOO_LARGE", status_code=413)

    return await _store(
        services,
        UploadInput(
            buffer=data,
            display_name=body.filename,
            mime_type=detect_mime_type(data, body.mime_type),
            size=len(data),
            owner_id=owner_id,
            visibility=body.visibility or AssetVisibility.PRIVATE,
        ),
    )


@router.get("/{asset_id}", response_model=None)
async def get_asset_metadata(
    asset_id: str,
    owner_id: str | None = Depends(get_owner_id),
    services: AssetServices = Depends(get_services),
    _limit=Depends(rate_limit(RateLimitCategory.READ)),
) -> dict:
    """Get asset metadata.

    Non-owners of a private asset receive only id, displayName,
    mimeType, size and createdAt.

    Raises:
        HTTPException: 404 if the asset does not exist
    """
    metadata: PublicAssetMetadata | PrivateAssetMetadata | None
    metadata = await services.manager.get_metadata_by_id(asset_id, owner_id)
    if metadata is None:
        raise HTTPException(status_code=404, detail="Asset not found")
    return metadata.model_dump(mode="json", by_alias=True)


@router.get("/{asset_id}/file")
async def get_asset_file(
    asset_id: str,
    owner_id: str | None = Depends(get_owner_id),
    services: AssetServices = Depends(get_services),
    _limit=Depends(rate_limit(RateLimitCategory.READ)),
) -> Response:
    """Stream the asset bytes.

    Raises:
        HTTPException: 404 if missing, 403 for a private asset the caller
            does not own
    """
    result = await services.manager.get_file_by_id(asset_id, owner_id)
    if result.status == FileStatus.NOT_FOUND:
        raise HTTPException(status_code=404, detail="Asset not found")
    if result.status == FileStatus.FORBIDDEN:
        raise HTTPException(status_code=403, detail="Access denied")
    return _file_response(result.file)


@router.delete("/{asset_id}", response_model=DeleteResponse, response_model_exclude_none=True)
async def delete_asset(
    asset_id: str,
    services: AssetServices = Depends(get_services),
    _limit=Depends(rate_limit(RateLimitCategory.DELETE)),
) -> DeleteResponse:
    """Delete an asset. Deleting twice is not an error."""
    status = await services.manager.delete(asset_id)
    if status == DeleteStatus.NOT_FOUND:
        return DeleteResponse(deleted=False, reason="File not found")
    return DeleteResponse(deleted=True)


@router.post("/{asset_id}/signed-url", response_model=SignedUrlResponse)
async def create_signed_url(
    asset_id: str,
    request: Request,
    ttl: int | None = Query(default=None, ge=1, description="Link lifetime in seconds"),
    owner_id: str | None = Depends(get_owner_id),
    services: AssetServices = Depends(get_services),
    _limit=Depends(rate_limit(RateLimitCategory.READ)),
) -> SignedUrlResponse:
    """Issue a time-limited delivery link for a public asset.

    Private assets never receive links. When the asset has an owner, only
    that owner may issue links for it.

    Raises:
        InvalidRequestError: ttl above the configured maximum
        HTTPException: 404 if missing or private, 403 for a non-owner
    """
    settings = services.settings
    ttl_seconds = ttl or settings.SIGNED_URL_DEFAULT_TTL_SECONDS
    if ttl_seconds > settings.SIGNED_URL_MAX_TTL_SECONDS:
        raise InvalidRequestError(
            f"ttl must not exceed {settings.SIGNED_URL_MAX_TTL_SECONDS} seconds",
            code="INVALID_TTL",
        )

    record = await services.manager.get(asset_id)
    if record is None or not record.is_public:
        raise HTTPException(status_code=404, detail="Asset not found")
    if record.owner_id is not None and owner_id != record.owner_id:
        raise HTTPException(status_code=403, detail="Access denied")

    link = services.signer.issue(asset_id, ttl_seconds)
    url = request.url_for("get_signed_asset_file", asset_id=asset_id).include_query_params(
        expires=link.expires,
        signature=link.signature,
    )
    logger.info(f"Signed URL issued for {asset_id} (expires {link.expires})")
    return SignedUrlResponse(url=str(url), expires=link.expires, signature=link.signature)


@router.get("/{asset_id}/signed", name="get_signed_asset_file")
async def get_signed_asset_file(
    asset_id: str,
    expires: int = Query(..., description="Expiry as unix seconds"),
    signature: str = Query(..., max_length=128),
    services: AssetServices = Depends(get_services),
    _limit=Depends(rate_limit(RateLimitCategory.READ)),
) -> Response:
    """Serve a public asset for a valid, unexpired signature.

    Raises:
        InvalidSignatureError: Bad or expired signature
        HTTPException: 404 if missing or not public
    """
    if not services.signer.verify(asset_id, expires, signature):
        raise InvalidSignatureError()

    record = await services.manager.get(asset_id)
    if record is None or not record.is_public:
        raise HTTPException(status_code=404, detail="Asset not found")

    result = await services.manager.get_file_by_id(asset_id, None)
    if result.status != FileStatus.OK:
        raise HTTPException(status_code=404, detail="Asset not found")
    return _file_response(result.file)
