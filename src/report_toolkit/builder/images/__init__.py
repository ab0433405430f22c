"""
Module: builder.images

Purpose:
    Image asset access for report rendering.

Key Classes:
    - LoadedImage: Decoded image with dimensions
    - AssetLoader: Abstract interface for image access
    - DirectoryAssetLoader: File-backed loader
    - AssetCache: Per-render cache

Dependencies:
    - PIL: Image decoding
"""

from .provider import AssetCache, AssetLoader, DirectoryAssetLoader, LoadedImage

__all__ = [
    "AssetCache",
    "AssetLoader",
    "DirectoryAssetLoader",
    "LoadedImage",
]
