from __future__ import annotations

import struct
from pathlib import Path
from typing import Union

import crc8

from ..codec.geometry import MAX_DIMENSION
from ..codec.types import PackedBitmap
from ..errors import ResourceError
from ..stamp import Stamp

MAGIC = b"PXST"
VERSION = 1
TRAILER = 0xFF
HEADER = struct.Struct("<4sBHHI")


def crc8_value(data: bytes) -> int:
    """Return CRC8 checksum byte for the payload."""
    hasher = crc8.crc8()
    hasher.update(data)
    return hasher.digest()[0]


def pack_resource(bitmap: PackedBitmap) -> bytes:
    """Wrap packed pixel data in the binary resource container."""
    if bitmap.width > MAX_DIMENSION or bitmap.height > MAX_DIMENSION:
        raise ResourceError(
            f"Size {bitmap.width}x{bitmap.height} exceeds {MAX_DIMENSION} pixels per side"
        )
    header = HEADER.pack(MAGIC, VERSION, bitmap.width, bitmap.height, len(bitmap.data))
    return header + bitmap.data + bytes([crc8_value(bitmap.data), TRAILER])


def unpack_resource(blob: bytes) -> PackedBitmap:
    """Parse a resource container, verifying framing and checksum."""
    if len(blob) < HEADER.size + 2:
        raise ResourceError(f"Resource is truncated ({len(blob)} bytes)")
    magic, version, width, height, length = HEADER.unpack_from(blob)
    if magic != MAGIC:
        raise ResourceError(f"Bad resource magic {magic!r}")
    if version != VERSION:
        raise ResourceError(f"Unsupported resource version {version}")
    end = HEADER.size + length
    if len(blob) != end + 2:
        raise ResourceError(f"Resource declares {length} payload bytes but is {len(blob)} bytes long")
    payload = bytes(blob[HEADER.size : end])
    checksum, trailer = blob[end], blob[end + 1]
    if trailer != TRAILER:
        raise ResourceError(f"Bad resource trailer 0x{trailer:02X}")
    if checksum != crc8_value(payload):
        raise ResourceError("Resource checksum mismatch")
    return PackedBitmap(width, height, payload)


def load_stamp(path: Union[str, Path]) -> Stamp:
    return Stamp.from_bitmap(unpack_resource(Path(path).read_bytes()))
