"""SQLAlchemy models for asset metadata."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime, Enum as SQLEnum, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from assetvault.core.models import MAX_DISPLAY_NAME_LENGTH, AssetRecord, AssetVisibility


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class Base(DeclarativeBase):
    """SQLAlchemy declarative base class."""

    pass


class AssetRow(Base):
    """Persisted asset metadata.

    Mirrors ``AssetRecord`` one-to-one; ``id`` is supplied by the manager.
    """

    __tablename__ = "assets"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    display_name: Mapped[str] = mapped_column(String(MAX_DISPLAY_NAME_LENGTH), nullable=False)
    mime_type: Mapped[str] = mapped_column(String(100), nullable=False)
    size: Mapped[int] = mapped_column(Integer, nullable=False)
    storage_path: Mapped[str] = mapped_column(String(512), nullable=False)
    public_url: Mapped[str | None] = mapped_column(String(1024), default=None)
    owner_id: Mapped[str | None] = mapped_column(String(255), default=None, index=True)
    visibility: Mapped[AssetVisibility] = mapped_column(
        SQLEnum(AssetVisibility, values_callable=lambda e: [m.value for m in e]),
        default=AssetVisibility.PRIVATE,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    @classmethod
    def from_record(cls, record: AssetRecord) -> "AssetRow":
        return cls(
            id=record.id,
            display_name=record.display_name,
            mime_type=record.mime_type,
            size=record.size,
            storage_path=record.storage_path,
            public_url=record.public_url,
            owner_id=record.owner_id,
            visibility=record.visibility,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )

    def to_record(self) -> AssetRecord:
        return AssetRecord(
            id=self.id,
            display_name=self.display_name,
            mime_type=self.mime_type,
            size=self.size,
            storage_path=self.storage_path,
            public_url=self.public_url,
            owner_id=self.owner_id,
            visibility=self.visibility,
            created_at=_as_utc(self.created_at),
            updated_at=_as_utc(self.updated_at),
        )
