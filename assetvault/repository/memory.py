"""In-memory asset repository for tests and single-process development."""

from __future__ import annotations

from assetvault.core.errors import DuplicateAssetError
from assetvault.core.models import AssetRecord
from assetvault.core.ports import AssetRepository


class InMemoryAssetRepository(AssetRepository):
    def __init__(self) -> None:
        self.records: dict[str, AssetRecord] = {}

    async def create(self, record: AssetRecord) -> AssetRecord:
        if record.id in self.records:
            raise DuplicateAssetError(record.id)
        self.records[record.id] = record
        return record

    async def find_by_id(self, asset_id: str) -> AssetRecord | None:
        return self.records.get(asset_id)

    async def delete_by_id(self, asset_id: str) -> None:
        self.records.pop(asset_id, None)
