"""Asset metadata repositories."""

from assetvault.repository.memory import InMemoryAssetRepository
from assetvault.repository.models import AssetRow, Base
from assetvault.repository.sql import SqlAssetRepository

__all__ = [
    "AssetRow",
    "Base",
    "InMemoryAssetRepository",
    "SqlAssetRepository",
]
