"""Display-name normalization for untrusted client file names.

Turns an arbitrary name into a value that is safe to store, log and place
in a ``Content-Disposition`` header.

Rules, in order:
    - Unicode NFKC normalization
    - Strip control characters
    - Path separators: reject (strict) or replace with ``_`` (sanitize)
    - Replace everything outside ``[A-Za-z0-9._-]`` with ``_``
    - Collapse repeated underscores
    - Trim leading/trailing dots and underscores
    - Truncate to ``max_length``
    - Fallback to ``file_{uuid}{ext}`` if nothing is left

Examples:
    >>> from assetvault.core.naming import normalize_display_name
    >>> normalize_display_name("../../etc/passwd").display_name
    'etc_passwd'
    >>> normalize_display_name("holiday photo.png").display_name
    'holiday_photo.png'

Tests:
    - tests/unit/test_core/test_naming.py
"""

from __future__ import annotations

import re
import unicodedata
import uuid
from dataclasses import dataclass
from enum import Enum

DEFAULT_MAX_LENGTH = 128
DEFAULT_FALLBACK_EXTENSION = ".bin"
FALLBACK_PREFIX = "file_"

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
_PATH_SEPARATORS = re.compile(r"[\\/]")
_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")
_REPEATED_UNDERSCORES = re.compile(r"_{2,}")
_EDGE_DOTS_UNDERSCORES = re.compile(r"^[._]+|[._]+$")


class NormalizeMode(str, Enum):
    """How path separators are handled."""

    STRICT = "strict"
    SANITIZE = "sanitize"


class SanitizeReason(str, Enum):
    """Audit reason attached to a changed name."""

    EMPTY_FILENAME = "empty_filename"
    PATH_SEPARATORS_DETECTED = "path_separators_detected"
    FULLY_SANITIZED_EMPTY = "fully_sanitized_empty"


@dataclass(frozen=True, slots=True)
class NormalizedName:
    """Outcome of ``normalize_display_name``.

    Attributes:
        display_name: The safe name.
        original: The raw input ("" when None was given).
        sanitized: True if ``display_name`` differs from ``original``.
        reason: Audit reason, when one applies.
    """

    display_name: str
    original: str
    sanitized: bool
    reason: SanitizeReason | None = None


def generate_fallback_name(extension: str = DEFAULT_FALLBACK_EXTENSION) -> str:
    """Build a fresh random name such as ``file_<uuid>.bin``."""
    return f"{FALLBACK_PREFIX}{uuid.uuid4()}{extension}"


def normalize_display_name(
    name: str | None,
    *,
    mode: NormalizeMode = NormalizeMode.SANITIZE,
    max_length: int = DEFAULT_MAX_LENGTH,
    fallback_extension: str = DEFAULT_FALLBACK_EXTENSION,
) -> NormalizedName:
    """Normalize an untrusted display name.

    Args:
        name: Raw client-supplied name (may be None).
        mode: STRICT replaces a name containing path separators with a
            generated fallback; SANITIZE substitutes underscores.
        max_length: Maximum length of the result.
        fallback_extension: Extension used for generated names.

    Returns:
        NormalizedName describing the result.
    """
    original = name or ""

    if not original:
        return NormalizedName(
            display_name=generate_fallback_name(fallback_extension),
            original=original,
            sanitized=True,
            reason=SanitizeReason.EMPTY_FILENAME,
        )

    value = unicodedata.normalize("NFKC", original)
    value = _CONTROL_CHARS.sub("", value)

    reason: SanitizeReason | None = None
    if _PATH_SEPARATORS.search(value):
        if mode == NormalizeMode.STRICT:
            return NormalizedName(
                display_name=generate_fallback_name(fallback_extension),
                original=original,
                sanitized=True,
                reason=SanitizeReason.PATH_SEPARATORS_DETECTED,
            )
        value = _PATH_SEPARATORS.sub("_", value)
        reason = SanitizeReason.PATH_SEPARATORS_DETECTED

    value = _UNSAFE_CHARS.sub("_", value)
    value = _REPEATED_UNDERSCORES.sub("_", value)
    value = _EDGE_DOTS_UNDERSCORES.sub("", value)
    value = value[:max_length]

    if not value:
        return NormalizedName(
            display_name=generate_fallback_name(fallback_extension),
            original=original,
            sanitized=True,
            reason=SanitizeReason.FULLY_SANITIZED_EMPTY,
        )

    return NormalizedName(
        display_name=value,
        original=original,
        sanitized=value != original,
        reason=reason,
    )
