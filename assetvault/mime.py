"""Content-based MIME type detection.

The client's claimed type is never trusted: image bytes are sniffed with
Pillow, other formats by their magic-number signature (``filetype``).
Content that neither recognises becomes ``application/octet-stream``, which
the server allow-list rejects unless an operator opts in to it.

Examples:
    >>> detect_mime_type(png_bytes, claimed="image/jpeg")
    'image/png'
    >>> detect_mime_type(b"not an image", claimed="image/png")
    'application/octet-stream'
    >>> detect_mime_type(b"#!/bin/sh", claimed="application/pdf")
    'application/octet-stream'
"""

from __future__ import annotations

import io
import logging

import filetype
from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

OCTET_STREAM = "application/octet-stream"


def sniff_image_mime(buffer: bytes) -> str | None:
    """Return the MIME type Pillow recognises in ``buffer``, if any."""
    if not buffer:
        return None
    try:
        with Image.open(io.BytesIO(buffer)) as img:
            fmt = img.format
    except (UnidentifiedImageError, OSError, ValueError):
        return None
    if fmt is None:
        return None
    return Image.MIME.get(fmt.upper())


def sniff_signature_mime(buffer: bytes) -> str | None:
    """Return the MIME type implied by the file's leading signature bytes."""
    if not buffer:
        return None
    kind = filetype.guess(buffer)
    return kind.mime if kind is not None else None


def detect_mime_type(buffer: bytes, claimed: str | None = None) -> str:
    """Decide the MIME type for an upload from its content.

    Args:
        buffer: Uploaded bytes.
        claimed: Type claimed by the client, if any. Only logged when the
            content says otherwise.

    Returns:
        The type Pillow or the signature table detects, or
        ``application/octet-stream``.
    """
    detected = sniff_image_mime(buffer) or sniff_signature_mime(buffer)
    if detected is None:
        if claimed and claimed != OCTET_STREAM:
            logger.info(f"Claimed MIME type {claimed} not confirmed by content")
        return OCTET_STREAM

    if claimed and claimed != detected:
        logger.info(f"Claimed MIME type {claimed} replaced by detected {detected}")
    return detected
