from __future__ import annotations

MAX_DIMENSION = 0xFFFF


def row_byte_count(width: int) -> int:
    """Return the number of bytes holding one row of ``width`` pixels."""
    return (width + 7) // 8


def encoded_length(width: int, height: int) -> int:
    """Return the exact packed length for a ``width`` x ``height`` image."""
    return height * row_byte_count(width)


def byte_index(x: int, y: int, width: int) -> int:
    return y * row_byte_count(width) + x // 8


def bit_position(x: int) -> int:
    # MSB holds the leftmost pixel of each group of 8
    return 7 - (x % 8)


def bit_mask(x: int) -> int:
    return 1 << bit_position(x)
