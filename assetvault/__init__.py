"""AssetVault - binary asset storage with ownership-based access control."""

__version__ = "1.0.0"
