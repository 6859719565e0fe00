from __future__ import annotations

import logging

from PIL import Image, ImageOps, UnidentifiedImageError

from ..codec.types import PixelGrid
from ..errors import DecodeFailure

logger = logging.getLogger(__name__)

DECODE_ERRORS = (OSError, SyntaxError, UnidentifiedImageError, Image.DecompressionBombError)


class GridConverter:
    def load(self, path: str) -> PixelGrid:
        raise NotImplementedError


class RasterConverter(GridConverter):
    @staticmethod
    def _load_image(path: str) -> Image.Image:
        try:
            with Image.open(path) as img:
                if getattr(img, "n_frames", 1) > 1:
                    logger.warning("%s has %d frames, using the first", path, img.n_frames)
                img = ImageOps.exif_transpose(img)
                img.load()
                return img.copy()
        except DECODE_ERRORS as exc:
            raise DecodeFailure(f"Couldn't decode {path}: {exc}") from exc
