"""Service container wiring the asset core to its adapters.

One container per application instance. It owns the database engine (when
the SQL repository is selected) and the process-scoped rate-limiter state.

Examples:
    >>> services = build_services(get_settings())
    >>> await services.startup()
    >>> record = await services.manager.upload(...)
    >>> await services.shutdown()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncEngine

from assetvault.cache import InMemoryAssetCache
from assetvault.config import RepositoryBackendType, Settings
from assetvault.core.manager import AssetManager
from assetvault.core.ports import AssetCache, AssetRepository
from assetvault.core.rate_limiter import RateLimitPolicy
from assetvault.core.signed_url import SignedUrlService
from assetvault.database import create_engine_for_url, create_session_factory, init_db
from assetvault.repository import InMemoryAssetRepository, SqlAssetRepository
from assetvault.storage import create_storage

logger = logging.getLogger(__name__)

ASSET_LOGGER_NAME = "assetvault.assets"


@dataclass
class AssetServices:
    settings: Settings
    manager: AssetManager
    signer: SignedUrlService
    rate_limits: RateLimitPolicy
    engine: AsyncEngine | None = None

    async def startup(self) -> None:
        """Create tables for the SQL repository."""
        if self.engine is not None:
            await init_db(self.engine)

    async def shutdown(self) -> None:
        if self.engine is not None:
            await self.engine.dispose()
            logger.info("Database connections closed")

    async def is_ready(self) -> bool:
        return await self.manager.repository.ping()


def build_services(settings: Settings) -> AssetServices:
    """Build adapters, the manager and the security primitives from settings."""
    engine: AsyncEngine | None = None
    repository: AssetRepository
    if settings.REPOSITORY_BACKEND == RepositoryBackendType.SQL:
        engine = create_engine_for_url(settings.DATABASE_URL, echo=settings.DEBUG)
        repository = SqlAssetRepository(create_session_factory(engine))
    else:
        repository = InMemoryAssetRepository()

    cache: AssetCache | None = None
    if settings.CACHE_ENABLED:
        cache = InMemoryAssetCache(
            ttl_seconds=settings.CACHE_TTL_SECONDS,
            max_entries=settings.CACHE_MAX_ENTRIES,
        )

    manager = AssetManager(
        storage=create_storage(settings.storage_config()),
        repository=repository,
        cache=cache,
        logger=logging.getLogger(ASSET_LOGGER_NAME),
        policy=settings.upload_policy(),
    )

    return AssetServices(
        settings=settings,
        manager=manager,
        signer=SignedUrlService(settings.SIGNED_URL_SECRET),
        rate_limits=settings.rate_limit_policy(),
        engine=engine,
    )
