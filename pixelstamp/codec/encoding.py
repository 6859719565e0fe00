from __future__ import annotations

from typing import List, Sequence

from .types import Color, PackedBitmap, PixelGrid, Sample


def threshold(sample: Sample, depth: int = 8) -> Color:
    """Map a luminance sample to black or white around the midpoint of its range."""
    if isinstance(sample, Color):
        return sample
    max_value = (1 << depth) - 1
    if 2 * sample < max_value:
        return Color.BLACK
    return Color.WHITE


def pack_line(line: Sequence[Color]) -> bytes:
    """Pack a row of colors MSB-first, zero-padding the final byte."""
    out = bytearray()
    for i in range(0, len(line), 8):
        chunk = line[i : i + 8]
        value = 0
        for bit, color in enumerate(chunk):
            if color is Color.WHITE:
                value |= 1 << (7 - bit)
        out.append(value)
    return bytes(out)


def threshold_line(line: Sequence[Sample], depth: int) -> List[Color]:
    return [threshold(sample, depth) for sample in line]


def encode(grid: PixelGrid) -> PackedBitmap:
    """Encode a decoded pixel grid into a row-padded 1-bit bitmap."""
    grid.validate()
    out = bytearray()
    for y in range(grid.height):
        out += pack_line(threshold_line(grid.row(y), grid.depth))
    return PackedBitmap(grid.width, grid.height, bytes(out))


def encode_colors(width: int, height: int, colors: Sequence[Color]) -> PackedBitmap:
    """Encode an already thresholded row-major color list."""
    return encode(PixelGrid(width, height, colors, depth=1))
