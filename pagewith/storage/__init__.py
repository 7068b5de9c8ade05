"""Compiled asset storage backends."""

from typing import Optional

from pagewith.storage.base import AssetStore, normalize_asset_path
from pagewith.storage.directory import DirectoryAssetStore
from pagewith.storage.memory import MemoryAssetStore

__all__ = [
    "AssetStore",
    "DirectoryAssetStore",
    "MemoryAssetStore",
    "create_asset_store",
    "normalize_asset_path",
]


def create_asset_store(in_memory: bool = True, output_dir: Optional[str] = None) -> AssetStore:
    """Create the asset store selected by the in-memory toggle."""
    if in_memory:
        return MemoryAssetStore()
    return DirectoryAssetStore(output_dir)
