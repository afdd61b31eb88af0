"""Tests for assetvault.core.models module."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from assetvault.core.models import (
    AssetFile,
    AssetRecord,
    AssetVisibility,
    FileResult,
    FileStatus,
    PrivateAssetMetadata,
    PublicAssetMetadata,
)


@pytest.mark.fast
class TestAssetVisibility:
    """Tests for AssetVisibility enum."""

    def test_values(self):
        assert AssetVisibility.PRIVATE.value == "private"
        assert AssetVisibility.PUBLIC.value == "public"


@pytest.mark.fast
class TestAssetRecord:
    """Tests for AssetRecord."""

    def test_defaults_to_private(self):
        now = datetime.now(timezone.utc)
        record = AssetRecord(
            id="a",
            display_name="x.png",
            mime_type="image/png",
            size=1,
            storage_path="k",
            created_at=now,
            updated_at=now,
        )
        assert record.visibility == AssetVisibility.PRIVATE
        assert record.is_public is False
        assert record.owner_id is None

    def test_camel_case_aliases(self, make_record):
        dumped = make_record().model_dump(by_alias=True)
        assert "displayName" in dumped
        assert "storagePath" in dumped
        assert "ownerId" in dumped

    def test_accepts_aliases(self, make_record):
        record = make_record()
        rebuilt = AssetRecord.model_validate(record.model_dump(by_alias=True))
        assert rebuilt == record

    def test_is_frozen(self, make_record):
        record = make_record()
        with pytest.raises(ValidationError):
            record.size = 99

    @pytest.mark.parametrize(
        "overrides",
        [{"size": 0}, {"storage_path": ""}, {"display_name": "x" * 256}],
    )
    def test_rejects_invalid_fields(self, make_record, overrides):
        with pytest.raises(ValidationError):
            make_record(**overrides)


@pytest.mark.fast
class TestProjections:
    """Tests for metadata projections."""

    def test_public_projection_fields(self, make_record):
        dumped = PublicAssetMetadata.from_record(make_record()).model_dump(by_alias=True)
        assert set(dumped) == {"id", "displayName", "mimeType", "size", "createdAt"}

    def test_private_projection_fields(self, make_record):
        dumped = PrivateAssetMetadata.from_record(make_record()).model_dump(by_alias=True)
        assert set(dumped) == {
            "id",
            "displayName",
            "mimeType",
            "size",
            "createdAt",
            "ownerId",
            "visibility",
            "updatedAt",
        }
        assert "storagePath" not in dumped


@pytest.mark.fast
class TestFileResult:
    """Tests for FileResult constructors."""

    def test_ok_carries_file(self):
        file = AssetFile(buffer=b"x", display_name="x.png", mime_type="image/png")
        result = FileResult.ok(file)
        assert result.status == FileStatus.OK
        assert result.file is file

    def test_not_found_and_forbidden_have_no_file(self):
        assert FileResult.not_found().file is None
        assert FileResult.forbidden().status == FileStatus.FORBIDDEN
