"""
Pytest configuration and fixtures for AssetVault tests.

Fixtures are synchronous; async tests build whatever needs an event loop
inside the test body.
"""
import io
import logging
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from PIL import Image

from assetvault.core.models import AssetRecord, AssetVisibility

FIXED_NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Manually advanced clock for limiter and signature tests."""

    def __init__(self, now: float = 1_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# ============================================
# Shared fixtures
# ============================================

@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_png():
    """Factory encoding a tiny real image (PNG by default)."""

    def _make(size=(4, 4), color="red", fmt="PNG") -> bytes:
        buf = io.BytesIO()
        Image.new("RGB", size, color).save(buf, format=fmt)
        return buf.getvalue()

    return _make


@pytest.fixture
def png_bytes(make_png) -> bytes:
    return make_png()


@pytest.fixture
def make_record():
    """Factory for AssetRecord with sensible defaults."""

    def _make(**overrides) -> AssetRecord:
        fields = {
            "id": "asset-1",
            "display_name": "photo.png",
            "mime_type": "image/png",
            "size": 12,
            "storage_path": "2026/10/abc.png",
            "public_url": None,
            "owner_id": "alice",
            "visibility": AssetVisibility.PRIVATE,
            "created_at": FIXED_NOW,
            "updated_at": FIXED_NOW,
        }
        fields.update(overrides)
        return AssetRecord(**fields)

    return _make


@pytest.fixture
def mock_logger() -> MagicMock:
    """Stand-in for the asset logger; assertions read ``log`` calls."""
    return MagicMock(spec=logging.Logger)


@pytest.fixture(autouse=True)
def reset_assetvault_logger():
    """Undo any sink installed by configure_logging during a test."""
    yield
    root = logging.getLogger("assetvault")
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.propagate = True
    root.setLevel(logging.NOTSET)


# ============================================
# Pytest Configuration
# ============================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "fast: Fast unit tests (no external services)"
    )
    config.addinivalue_line(
        "markers", "slow: Slow tests (long-running operations)"
    )
