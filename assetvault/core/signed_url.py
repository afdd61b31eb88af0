"""Stateless, time-bounded capability tokens for asset delivery.

A signature is ``HMAC-SHA256(secret, "{asset_id}:{expires}")`` in hex. It is
a pure function of its inputs, so any process holding the secret can
re-derive and check it. Signing does not look at visibility: callers must
confirm the asset is public before serving it through a link.

Examples:
    >>> service = SignedUrlService("a-long-server-secret")
    >>> sig = service.sign("asset-1", 1893456000)
    >>> service.verify("asset-1", 1893456000, sig)
    True

Tests:
    - tests/unit/test_core/test_signed_url.py
"""

from __future__ import annotations

import hashlib
import hmac
import time
from dataclasses import dataclass
from typing import Callable


@dataclass(frozen=True, slots=True)
class SignedLink:
    asset_id: str
    expires: int
    signature: str


class SignedUrlService:
    """Issues and verifies HMAC capability tokens."""

    def __init__(self, secret: str, clock: Callable[[], float] | None = None) -> None:
        if not secret:
            raise ValueError("Signed URL secret must not be empty")
        self._secret = secret.encode("utf-8")
        self._clock = clock or time.time

    def sign(self, asset_id: str, expires: int) -> str:
        """Return the hex signature for ``asset_id`` valid until ``expires`` (epoch seconds)."""
        payload = f"{asset_id}:{expires}".encode("utf-8")
        return hmac.new(self._secret, payload, hashlib.sha256).hexdigest()

    def verify(self, asset_id: str, expires: int, signature: str) -> bool:
        """Check a signature.

        Expiry is checked first, before any cryptographic work. The
        comparison is constant-time.
        """
        if self._clock() > expires:
            return False
        if not isinstance(signature, str):
            return False
        expected = self.sign(asset_id, expires)
        return hmac.compare_digest(expected.encode("ascii"), signature.encode("utf-8"))

    def issue(self, asset_id: str, ttl_seconds: int) -> SignedLink:
        """Sign ``asset_id`` for ``ttl_seconds`` from now."""
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be > 0")
        expires = int(self._clock()) + ttl_seconds
        return SignedLink(asset_id=asset_id, expires=expires, signature=self.sign(asset_id, expires))
