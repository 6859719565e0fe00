from .codec import Color, PackedBitmap, PixelGrid, encode, row_byte_count
from .errors import (
    DecodeFailure,
    DimensionMismatch,
    InvalidDimensions,
    OutOfBounds,
    PixelStampError,
    ResourceError,
    UnsupportedFormat,
)
from .stamp import Pixels, Stamp

__version__ = "0.1.0"

__all__ = [
    "Color",
    "DecodeFailure",
    "DimensionMismatch",
    "encode",
    "InvalidDimensions",
    "OutOfBounds",
    "PackedBitmap",
    "PixelGrid",
    "Pixels",
    "PixelStampError",
    "ResourceError",
    "row_byte_count",
    "Stamp",
    "UnsupportedFormat",
]
