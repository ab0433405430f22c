"""
Module: builder.images.provider

Purpose:
    Load the raster images drawn on a report's first page (two logos).
    Images are loaded once per render, before layout starts, and kept in
    an AssetCache for the lifetime of that render.

Key Classes:
    - LoadedImage: Decoded image with its dimensions
    - AssetLoader: Abstract base class for image access
    - DirectoryAssetLoader: Loads images from files under a directory
    - AssetCache: Per-render cache with concurrent preloading

Dependencies:
    - PIL: Image decoding

Used By:
    - builder.output.renderer: Logo drawing
    - builder.controller: Asset preloading
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Mapping, Optional

from PIL import Image, UnidentifiedImageError

from report_toolkit.errors import AssetError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadedImage:
    """
    Fully decoded image.

    Attributes:
        asset_id: Identifier the image was requested with
        image: Decoded PIL image (RGB or RGBA)
    """
    asset_id: str
    image: Image.Image

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    @property
    def aspect_ratio(self) -> float:
        return self.image.width / self.image.height

    def scaled_width(self, height: float) -> float:
        """Width that keeps the aspect ratio at the given height."""
        return height * self.aspect_ratio


class AssetLoader(ABC):
    """
    Abstract interface for loading images by identifier.

    Implementations handle the actual storage.
    """

    @abstractmethod
    def load_image(self, asset_id: str) -> LoadedImage:
        """
        Load and decode an image.

        Raises:
            AssetError: If the image cannot be found or decoded
        """


class DirectoryAssetLoader(AssetLoader):
    """
    Load images from files under a root directory.

    An asset id is either a key of ``mapping`` or a path relative to root.

    Example:
        >>> loader = DirectoryAssetLoader(Path("assets"), {"left_logo": "inea.png"})
        >>> loader.load_image("left_logo").width
        320
    """

    def __init__(self, root: Path, mapping: Optional[Mapping[str, str]] = None) -> None:
        self._root = root
        self._mapping = dict(mapping or {})

    def path_for(self, asset_id: str) -> Path:
        return self._root / self._mapping.get(asset_id, asset_id)

    def load_image(self, asset_id: str) -> LoadedImage:
        path = self.path_for(asset_id)
        if not path.exists():
            raise AssetError(f"Image not found for {asset_id!r}: {path}")
        try:
            with Image.open(path) as img:
                img.load()
                mode = "RGBA" if img.mode in ("RGBA", "LA", "P") else "RGB"
                decoded = img.convert(mode)
        except (UnidentifiedImageError, OSError) as e:
            raise AssetError(f"Cannot decode image {asset_id!r} at {path}: {e}") from e
        if decoded.width == 0 or decoded.height == 0:
            raise AssetError(f"Image {asset_id!r} has no pixels: {path}")
        logger.debug(f"Loaded {asset_id!r} ({decoded.width}x{decoded.height}) from {path}")
        return LoadedImage(asset_id=asset_id, image=decoded)


class AssetCache:
    """
    Images loaded for one render.

    Not shared between renders; callers that export repeatedly may keep
    their own cache and pass it in.
    """

    def __init__(self, loader: Optional[AssetLoader] = None) -> None:
        self._loader = loader
        self._images: Dict[str, LoadedImage] = {}

    def preload(self, asset_ids: Iterable[str]) -> None:
        """
        Load every listed image that is not cached yet.

        Raises:
            AssetError: If any image fails to load (nothing partial is cached)
        """
        missing = [a for a in dict.fromkeys(asset_ids) if a not in self._images]
        if not missing:
            return
        if self._loader is None:
            raise AssetError(f"No asset loader configured for: {', '.join(missing)}")

        if len(missing) > 1:
            with ThreadPoolExecutor(max_workers=min(4, len(missing))) as pool:
                loaded = list(pool.map(self._loader.load_image, missing))
        else:
            loaded = [self._loader.load_image(missing[0])]

        for image in loaded:
            self._images[image.asset_id] = image
        logger.info(f"Preloaded {len(loaded)} image assets")

    def add(self, image: LoadedImage) -> None:
        self._images[image.asset_id] = image

    def get(self, asset_id: str) -> LoadedImage:
        """
        Get a preloaded image.

        Raises:
            AssetError: If the image was never preloaded
        """
        try:
            return self._images[asset_id]
        except KeyError:
            raise AssetError(f"Image asset not loaded: {asset_id!r}") from None

    def __contains__(self, asset_id: object) -> bool:
        return asset_id in self._images

    def __len__(self) -> int:
        return len(self._images)
