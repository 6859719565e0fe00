from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import List, Sequence, Tuple, Union

from ..errors import DimensionMismatch, InvalidDimensions
from .geometry import MAX_DIMENSION, encoded_length, row_byte_count

Sample = Union[int, "Color"]


class Color(enum.Enum):
    """Color of a single pixel. ``WHITE`` is stored as a 1 bit."""

    BLACK = 0
    WHITE = 1

    def __str__(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class PixelGrid:
    """Decoded image: row-major luminance samples of ``depth`` bits each."""

    width: int
    height: int
    samples: Sequence[Sample]
    depth: int = 8

    def validate(self) -> None:
        """Validate dimensions and sample count before encoding."""
        if self.width < 0 or self.height < 0:
            raise InvalidDimensions(f"Negative size {self.width}x{self.height}")
        if self.width > MAX_DIMENSION or self.height > MAX_DIMENSION:
            raise InvalidDimensions(
                f"Size {self.width}x{self.height} exceeds {MAX_DIMENSION} pixels per side"
            )
        if (self.width == 0) != (self.height == 0):
            raise InvalidDimensions(f"Degenerate size {self.width}x{self.height}")
        if self.depth <= 0:
            raise InvalidDimensions(f"Channel depth must be positive, got {self.depth}")
        if len(self.samples) != self.width * self.height:
            raise InvalidDimensions(
                f"Grid reports {len(self.samples)} samples, expected "
                f"{self.width * self.height} for {self.width}x{self.height}"
            )

    @property
    def max_value(self) -> int:
        return (1 << self.depth) - 1

    def row(self, y: int) -> Sequence[Sample]:
        return self.samples[y * self.width : (y + 1) * self.width]


@dataclass(frozen=True)
class PackedBitmap:
    """One bit per pixel, each row padded to a whole number of bytes."""

    width: int
    height: int
    data: bytes

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise DimensionMismatch(f"Negative size {self.width}x{self.height}")
        expected = encoded_length(self.width, self.height)
        if len(self.data) != expected:
            raise DimensionMismatch(
                f"Packed data is {len(self.data)} bytes, expected {expected} "
                f"for {self.width}x{self.height}"
            )
        if not isinstance(self.data, bytes):
            object.__setattr__(self, "data", bytes(self.data))

    @property
    def row_byte_count(self) -> int:
        return row_byte_count(self.width)

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)

    def rows(self) -> List[bytes]:
        """Return the packed bytes split into one slice per row."""
        stride = self.row_byte_count
        return [self.data[y * stride : (y + 1) * stride] for y in range(self.height)]
