"""SQLAlchemy-backed asset repository."""

from __future__ import annotations

import logging

from sqlalchemy import delete, select, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from assetvault.core.errors import DuplicateAssetError
from assetvault.core.models import AssetRecord
from assetvault.core.ports import AssetRepository
from assetvault.repository.models import AssetRow

logger = logging.getLogger(__name__)


class SqlAssetRepository(AssetRepository):
    """Repository using one short-lived session per call."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def create(self, record: AssetRecord) -> AssetRecord:
        async with self._session_factory() as session:
            session.add(AssetRow.from_record(record))
            try:
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                logger.warning(f"Duplicate asset id rejected: {record.id}")
                raise DuplicateAssetError(record.id) from e
        return record

    async def find_by_id(self, asset_id: str) -> AssetRecord | None:
        async with self._session_factory() as session:
            result = await session.execute(select(AssetRow).where(AssetRow.id == asset_id))
            row = result.scalar_one_or_none()
            return row.to_record() if row else None

    async def delete_by_id(self, asset_id: str) -> None:
        async with self._session_factory() as session:
            await session.execute(delete(AssetRow).where(AssetRow.id == asset_id))
            await session.commit()

    async def ping(self) -> bool:
        try:
            async with self._session_factory() as session:
                await session.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"Repository health check failed: {e}")
            return False
