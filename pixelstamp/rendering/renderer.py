from __future__ import annotations

from typing import List, Union

from PIL import Image

from ..codec.encoding import encode
from ..codec.types import Color, PixelGrid
from ..stamp import Stamp

ALPHA_MODES = ("RGBA", "LA", "PA", "RGBa", "La")
WIDE_MODES = ("I", "I;16", "I;16L", "I;16B", "I;16N")


def flat_samples(img: Image.Image) -> List[int]:
    """Return the row-major pixel values of a single-band image."""
    if hasattr(img, "get_flattened_data"):
        return list(img.get_flattened_data())
    return list(img.getdata())


def image_to_grid(img: Image.Image) -> PixelGrid:
    """Sample a Pillow image into a grid at its native channel depth."""
    width, height = img.size
    if img.mode == "1":
        data = flat_samples(img)
        return PixelGrid(width, height, [1 if p else 0 for p in data], depth=1)
    if img.mode in WIDE_MODES:
        data = flat_samples(img)
        return PixelGrid(width, height, [max(0, min(0xFFFF, p)) for p in data], depth=16)
    img = flatten_alpha(img)
    data = flat_samples(img.convert("L"))
    return PixelGrid(width, height, data, depth=8)


def flatten_alpha(img: Image.Image) -> Image.Image:
    """Composite transparent pixels over black, the background color."""
    if img.mode == "P" and "transparency" in img.info:
        img = img.convert("RGBA")
    if img.mode not in ALPHA_MODES:
        return img
    rgba = img.convert("RGBA")
    background = Image.new("RGBA", rgba.size, (0, 0, 0, 255))
    return Image.alpha_composite(background, rgba).convert("RGB")


def grid_to_image(stamp: Union[Stamp, PixelGrid]) -> Image.Image:
    """Render a stamp (or a grid, thresholded) as a mode ``1`` Pillow image."""
    if isinstance(stamp, PixelGrid):
        stamp = Stamp.from_bitmap(encode(stamp))
    img = Image.new("1", (stamp.width, stamp.height), 0)
    pixels = img.load()
    for x, y, color in stamp.pixels():
        if color is Color.WHITE:
            pixels[x, y] = 255
    return img
