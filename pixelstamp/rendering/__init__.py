from __future__ import annotations

import os
from typing import Dict, Optional, Set

from .base import GridConverter
from .image import ImageConverter
from .renderer import grid_to_image, image_to_grid
from ..codec.types import PixelGrid
from ..errors import UnsupportedFormat

IMAGE_EXTENSIONS = (
    ".png",
    ".bmp",
    ".gif",
    ".jpg",
    ".jpeg",
    ".tif",
    ".tiff",
    ".webp",
    ".ppm",
    ".pgm",
    ".pbm",
    ".ico",
    ".tga",
)
SUPPORTED_EXTENSIONS: Set[str] = set(IMAGE_EXTENSIONS)


class GridLoader:
    def __init__(self, converters: Optional[Dict[str, GridConverter]] = None) -> None:
        if converters is None:
            converters = {}
            image_converter = ImageConverter()
            for ext in IMAGE_EXTENSIONS:
                converters[ext] = image_converter
        self._converters = converters

    @property
    def supported_extensions(self) -> Set[str]:
        return set(self._converters.keys())

    def load(self, path: str) -> PixelGrid:
        ext = os.path.splitext(path)[1].lower()
        converter = self._converters.get(ext)
        if not converter:
            raise UnsupportedFormat(f"Unsupported file extension: {ext or '(none)'}")
        return converter.load(path)


def load_grid(path: str) -> PixelGrid:
    return GridLoader().load(path)


__all__ = [
    "GridLoader",
    "grid_to_image",
    "image_to_grid",
    "load_grid",
    "PixelGrid",
    "SUPPORTED_EXTENSIONS",
]
