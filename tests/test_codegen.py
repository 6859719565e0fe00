import pytest

from pixelstamp import DimensionMismatch, PackedBitmap, ResourceError, Stamp
from pixelstamp.codegen import (
    crc8_value,
    emit,
    emit_c,
    emit_python,
    emit_rust,
    load_stamp,
    pack_resource,
    symbol_name,
    unpack_resource,
)
from pixelstamp.codegen.resource import HEADER, MAGIC, VERSION

INVADER = PackedBitmap(3, 2, bytes([0b10100000, 0b01000000]))


def test_resource_round_trip():
    blob = pack_resource(INVADER)
    assert blob.startswith(MAGIC)
    assert blob[-1] == 0xFF
    assert blob[-2] == crc8_value(INVADER.data)
    assert len(blob) == HEADER.size + len(INVADER.data) + 2
    assert unpack_resource(blob) == INVADER


def test_resource_detects_corruption():
    blob = bytearray(pack_resource(INVADER))
    blob[HEADER.size] ^= 0x01
    with pytest.raises(ResourceError, match="checksum"):
        unpack_resource(bytes(blob))


@pytest.mark.parametrize(
    "blob",
    [
        b"",
        b"PXST",
        b"XXXX" + pack_resource(INVADER)[4:],
        pack_resource(INVADER)[:-1],
        pack_resource(INVADER)[:-1] + b"\x00",
    ],
)
def test_resource_rejects_bad_framing(blob):
    with pytest.raises(ResourceError):
        unpack_resource(blob)


def test_resource_rejects_other_versions():
    blob = bytearray(pack_resource(INVADER))
    blob[4] = VERSION + 1
    with pytest.raises(ResourceError, match="version"):
        unpack_resource(bytes(blob))


def test_resource_dimensions_must_match_payload():
    payload = b"\x00"
    blob = HEADER.pack(MAGIC, VERSION, 3, 2, len(payload)) + payload + bytes([crc8_value(payload), 0xFF])
    with pytest.raises(DimensionMismatch):
        unpack_resource(blob)


def test_load_stamp(tmp_path):
    path = tmp_path / "invader.pxs"
    path.write_bytes(emit(INVADER, "bin", "INVADER"))
    assert load_stamp(path) == Stamp(3, 2, INVADER.data)


def test_emit_c():
    text = emit_c(INVADER, "INVADER").decode("ascii")
    assert "#define INVADER_WIDTH 3" in text
    assert "#define INVADER_HEIGHT 2" in text
    assert "static const uint8_t INVADER[2] = {" in text
    assert "    0xA0,\n    0x40,\n" in text


def test_emit_c_empty_bitmap_is_valid():
    text = emit_c(PackedBitmap(0, 0, b""), "EMPTY").decode("ascii")
    assert "#define EMPTY_LENGTH 0" in text
    assert "EMPTY[1] = {\n    0x00,\n};" in text


def test_emit_rust():
    text = emit_rust(INVADER, "INVADER").decode("ascii")
    assert "pub const INVADER_WIDTH: usize = 3;" in text
    assert "pub static INVADER: [u8; 2] = [" in text
    assert "0b10100000," in text


def test_emit_rust_wide_rows_use_hex():
    bitmap = PackedBitmap(40, 1, bytes([0xFF, 0, 1, 2, 3]))
    text = emit_rust(bitmap, "WIDE").decode("ascii")
    assert "0xFF, 0x00, 0x01, 0x02, 0x03," in text


def test_emit_python_is_importable():
    namespace = {}
    exec(emit_python(INVADER, "INVADER").decode("ascii"), namespace)
    assert namespace["INVADER_WIDTH"] == 3
    assert namespace["INVADER_HEIGHT"] == 2
    assert namespace["INVADER_DATA"] == INVADER.data
    assert namespace["INVADER"] == Stamp(3, 2, INVADER.data)


def test_emit_python_symbol_may_reuse_constant_names():
    namespace = {}
    exec(emit_python(PackedBitmap(1, 1, b"\x80"), "DATA").decode("ascii"), namespace)
    assert namespace["DATA_DATA"] == b"\x80"
    assert namespace["DATA"] == Stamp(1, 1, b"\x80")


def test_emit_unknown_format():
    with pytest.raises(ValueError):
        emit(INVADER, "pascal", "INVADER")


@pytest.mark.parametrize("name", ["my sprite", "8BALL", "a-b", ""])
def test_emit_rejects_invalid_symbol(name):
    with pytest.raises(ValueError, match="Invalid symbol name"):
        emit(INVADER, "c", name)


def test_pack_resource_rejects_oversized_dimensions():
    with pytest.raises(ResourceError, match="65535"):
        pack_resource(PackedBitmap(0x10000, 0, b""))


@pytest.mark.parametrize(
    "path,expected",
    [
        ("assets/invader.png", "INVADER"),
        ("assets/my-sprite 2.png", "MY_SPRITE_2"),
        ("8ball.png", "_8BALL"),
        ("---.png", "STAMP"),
    ],
)
def test_symbol_name(path, expected):
    assert symbol_name(path) == expected
