"""Object key generation for the blob store.

Keys never contain client-supplied text. The extension comes from the
validated MIME type.

Format: {YYYY}/{MM}/{uuid32}{ext}

Examples:
    >>> from assetvault.storage.naming import generate_object_key
    >>> generate_object_key("image/png")
    '2026/10/3f2a...e1.png'
"""

from __future__ import annotations

import mimetypes
import uuid
from datetime import datetime, timezone

MIME_EXTENSIONS: dict[str, str] = {
    "image/png": ".png",
    "image/jpeg": ".jpg",
    "image/webp": ".webp",
    "image/gif": ".gif",
    "application/pdf": ".pdf",
}

DEFAULT_MIME_TYPE = "application/octet-stream"


def mime_to_extension(mime_type: str) -> str:
    """Get a file extension (with dot) for a MIME type, ``.bin`` if unknown."""
    if mime_type in MIME_EXTENSIONS:
        return MIME_EXTENSIONS[mime_type]
    return mimetypes.guess_extension(mime_type) or ".bin"


def extension_to_mime(key: str) -> str:
    """Best-effort MIME type for a stored key."""
    for mime_type, ext in MIME_EXTENSIONS.items():
        if key.endswith(ext):
            return mime_type
    guessed, _ = mimetypes.guess_type(key)
    return guessed or DEFAULT_MIME_TYPE


def generate_object_key(
    mime_type: str,
    date: datetime | None = None,
    uuid_str: str | None = None,
) -> str:
    """Generate a unique, opaque object key.

    Args:
        mime_type: Validated content type (decides the extension).
        date: Override date (defaults to now UTC).
        uuid_str: Override random part.

    Returns:
        Relative key such as ``2026/10/<hex>.png``.
    """
    if date is None:
        date = datetime.now(timezone.utc)
    if uuid_str is None:
        uuid_str = uuid.uuid4().hex
    return f"{date:%Y}/{date:%m}/{uuid_str}{mime_to_extension(mime_type)}"
