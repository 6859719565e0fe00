from .encoding import encode, encode_colors, pack_line, threshold
from .geometry import (
    MAX_DIMENSION,
    bit_mask,
    bit_position,
    byte_index,
    encoded_length,
    row_byte_count,
)
from .types import Color, PackedBitmap, PixelGrid

__all__ = [
    "bit_mask",
    "bit_position",
    "byte_index",
    "Color",
    "encode",
    "encode_colors",
    "encoded_length",
    "MAX_DIMENSION",
    "pack_line",
    "PackedBitmap",
    "PixelGrid",
    "row_byte_count",
    "threshold",
]
