from __future__ import annotations

import logging

from .base import RasterConverter
from .renderer import image_to_grid
from ..codec.types import PixelGrid

logger = logging.getLogger(__name__)


class ImageConverter(RasterConverter):
    def load(self, path: str) -> PixelGrid:
        img = self._load_image(path)
        logger.debug("Decoded %s: %dx%d mode %s", path, img.width, img.height, img.mode)
        return image_to_grid(img)
