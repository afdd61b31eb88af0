"""In-process TTL cache for asset records.

A bounded mirror of repository rows. Entries expire after ``ttl_seconds``;
the least recently used entry is evicted when ``max_entries`` is reached.
Misses are always safe: the manager falls back to the repository.

Tests:
    - tests/unit/test_adapters/test_cache.py
"""

from __future__ import annotations

import logging
import time
from collections import OrderedDict
from typing import Callable

from assetvault.core.models import AssetRecord
from assetvault.core.ports import AssetCache

logger = logging.getLogger(__name__)


class InMemoryAssetCache(AssetCache):
    """LRU cache with per-entry expiry."""

    def __init__(
        self,
        ttl_seconds: float = 300,
        max_entries: int = 1024,
        clock: Callable[[], float] | None = None,
    ) -> None:
        if max_entries <= 0:
            raise ValueError("max_entries must be > 0")
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock or time.monotonic
        self._entries: OrderedDict[str, tuple[float, AssetRecord]] = OrderedDict()

    async def get(self, asset_id: str) -> AssetRecord | None:
        entry = self._entries.get(asset_id)
        if entry is None:
            return None

        expires_at, record = entry
        if self._clock() >= expires_at:
            del self._entries[asset_id]
            return None

        self._entries.move_to_end(asset_id)
        logger.debug(f"cache_hit {asset_id}")
        return record

    async def set(self, record: AssetRecord) -> None:
        self._entries[record.id] = (self._clock() + self.ttl_seconds, record)
        self._entries.move_to_end(record.id)
        while len(self._entries) > self.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug(f"cache_evict {evicted}")

    async def delete(self, asset_id: str) -> None:
        self._entries.pop(asset_id, None)

    def __len__(self) -> int:
        return len(self._entries)
