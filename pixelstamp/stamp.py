from __future__ import annotations

from typing import Iterator, Optional, Tuple, Union

from .codec.geometry import bit_mask, byte_index, encoded_length, row_byte_count
from .codec.types import Color, PackedBitmap
from .errors import DimensionMismatch, OutOfBounds

Pixel = Tuple[int, int, Color]
BytesLike = Union[bytes, bytearray, memoryview]


class Stamp:
    """Read-only 1-bit raster image backed by row-padded packed bytes.

    Coordinate ``(0, 0)`` is the top-left corner. Each row occupies
    ``ceil(width / 8)`` bytes with the leftmost pixel in the most significant bit;
    a set bit is ``Color.WHITE`` and a clear bit is ``Color.BLACK``. Padding bits
    at the end of a row are never read.
    """

    __slots__ = ("_width", "_height", "_data")

    def __init__(self, width: int, height: int, data: BytesLike) -> None:
        if width < 0 or height < 0:
            raise DimensionMismatch(f"Negative size {width}x{height}")
        data = bytes(data)
        expected = encoded_length(width, height)
        if len(data) != expected:
            raise DimensionMismatch(
                f"Stamp data is {len(data)} bytes, expected {expected} for {width}x{height}"
            )
        self._width = width
        self._height = height
        self._data = data

    @classmethod
    def from_bitmap(cls, bitmap: PackedBitmap) -> "Stamp":
        return cls(bitmap.width, bitmap.height, bitmap.data)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def size(self) -> Tuple[int, int]:
        return (self._width, self._height)

    @property
    def pixel_count(self) -> int:
        return self._width * self._height

    @property
    def row_byte_count(self) -> int:
        return row_byte_count(self._width)

    @property
    def data(self) -> bytes:
        return self._data

    def to_bitmap(self) -> PackedBitmap:
        return PackedBitmap(self._width, self._height, self._data)

    def is_within_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self._width and 0 <= y < self._height

    def pixels(self) -> "Pixels":
        """Return a fresh iterator over ``(x, y, color)`` in row-major order."""
        return Pixels(self)

    def color_at(self, x: int, y: int) -> Color:
        """Return the color at ``(x, y)``, raising ``OutOfBounds`` outside the image."""
        if not self.is_within_bounds(x, y):
            raise OutOfBounds(f"({x}, {y}) is outside {self._width}x{self._height}")
        return self._color_unchecked(x, y)

    def get_color(self, x: int, y: int) -> Optional[Color]:
        if not self.is_within_bounds(x, y):
            return None
        return self._color_unchecked(x, y)

    def _color_unchecked(self, x: int, y: int) -> Color:
        byte = self._data[byte_index(x, y, self._width)]
        if byte & bit_mask(x):
            return Color.WHITE
        return Color.BLACK

    def __iter__(self) -> Iterator[Pixel]:
        return self.pixels()

    def __len__(self) -> int:
        return self.pixel_count

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Stamp):
            return NotImplemented
        return (self._width, self._height, self._data) == (other._width, other._height, other._data)

    def __hash__(self) -> int:
        return hash((self._width, self._height, self._data))

    def __repr__(self) -> str:
        return f"Stamp(width={self._width}, height={self._height}, data=<{len(self._data)} bytes>)"


class Pixels:
    """Iterator over the pixels of a ``Stamp``.

    Supports ``len()`` for the remaining count and can be consumed from both
    ends: ``next()`` advances from the top-left, ``next_back()`` and
    ``reversed()`` from the bottom-right. The two ends never cross.
    """

    __slots__ = ("_stamp", "_front", "_back")

    def __init__(self, stamp: Stamp) -> None:
        self._stamp = stamp
        self._front = 0
        self._back = stamp.pixel_count

    def __iter__(self) -> "Pixels":
        return self

    def __next__(self) -> Pixel:
        if self._front >= self._back:
            raise StopIteration
        pixel = self._pixel(self._front)
        self._front += 1
        return pixel

    def next_back(self) -> Optional[Pixel]:
        """Take the last remaining pixel, or ``None`` when exhausted."""
        if self._front >= self._back:
            return None
        self._back -= 1
        return self._pixel(self._back)

    def __reversed__(self) -> Iterator[Pixel]:
        while self._front < self._back:
            self._back -= 1
            yield self._pixel(self._back)

    def __len__(self) -> int:
        return self._back - self._front

    def __length_hint__(self) -> int:
        return len(self)

    def _pixel(self, index: int) -> Pixel:
        y, x = divmod(index, self._stamp.width)
        return (x, y, self._stamp._color_unchecked(x, y))
