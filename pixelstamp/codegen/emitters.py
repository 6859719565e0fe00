from __future__ import annotations

import re
from pathlib import Path
from typing import Callable, Dict, List, Union

from ..codec.types import PackedBitmap
from .resource import pack_resource

BINARY_ROW_LIMIT = 4

SYMBOL_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

Emitter = Callable[[PackedBitmap, str], bytes]


def symbol_name(path: Union[str, Path]) -> str:
    """Derive an upper-case identifier from a file name."""
    stem = Path(path).stem
    name = re.sub(r"[^0-9A-Za-z]+", "_", stem).strip("_").upper()
    if not name:
        return "STAMP"
    if name[0].isdigit():
        return "_" + name
    return name


def validate_symbol(name: str) -> str:
    """Return ``name`` if it is usable as a C, Rust and Python identifier."""
    if not SYMBOL_RE.match(name):
        raise ValueError(f"Invalid symbol name '{name}': use letters, digits and underscores")
    return name


def format_row(row: bytes, prefix: str = "0b") -> List[str]:
    if len(row) <= BINARY_ROW_LIMIT:
        return [f"{prefix}{value:08b}" for value in row]
    return [f"0x{value:02X}" for value in row]


def _array_body(bitmap: PackedBitmap, indent: str, prefix: str = "0b") -> str:
    lines = []
    for row in bitmap.rows():
        if row:
            lines.append(indent + ", ".join(format_row(row, prefix)) + ",")
    return "\n".join(lines)


def emit_c(bitmap: PackedBitmap, name: str) -> bytes:
    # C has no 0b literals before C23, so always hex
    rows = []
    for row in bitmap.rows():
        if row:
            rows.append("    " + ", ".join(f"0x{value:02X}" for value in row) + ",")
    body = "\n".join(rows) or "    0x00,"
    length = max(1, len(bitmap.data))
    text = (
        f"/* {bitmap.width}x{bitmap.height}, {bitmap.row_byte_count} bytes per row */\n"
        "#include <stdint.h>\n"
        "\n"
        f"#define {name}_WIDTH {bitmap.width}\n"
        f"#define {name}_HEIGHT {bitmap.height}\n"
        f"#define {name}_LENGTH {len(bitmap.data)}\n"
        "\n"
        f"static const uint8_t {name}[{length}] = {{\n"
        f"{body}\n"
        "};\n"
    )
    return text.encode("ascii")


def emit_rust(bitmap: PackedBitmap, name: str) -> bytes:
    body = _array_body(bitmap, "    ")
    text = (
        f"// {bitmap.width}x{bitmap.height}, {bitmap.row_byte_count} bytes per row\n"
        f"pub const {name}_WIDTH: usize = {bitmap.width};\n"
        f"pub const {name}_HEIGHT: usize = {bitmap.height};\n"
        f"pub static {name}: [u8; {len(bitmap.data)}] = [\n"
        f"{body}\n"
        "];\n"
    )
    return text.encode("ascii")


def emit_python(bitmap: PackedBitmap, name: str) -> bytes:
    rows = [f"    {row!r}" for row in bitmap.rows() if row]
    body = "\n".join(rows) if rows else '    b""'
    text = (
        f'"""{name}: {bitmap.width}x{bitmap.height} 1-bit stamp."""\n'
        "from pixelstamp import Stamp\n"
        "\n"
        f"{name}_WIDTH = {bitmap.width}\n"
        f"{name}_HEIGHT = {bitmap.height}\n"
        f"{name}_DATA = (\n"
        f"{body}\n"
        ")\n"
        "\n"
        f"{name} = Stamp({name}_WIDTH, {name}_HEIGHT, {name}_DATA)\n"
    )
    return text.encode("ascii")


def emit_resource(bitmap: PackedBitmap, name: str) -> bytes:
    return pack_resource(bitmap)


EMITTERS: Dict[str, Emitter] = {
    "c": emit_c,
    "rust": emit_rust,
    "python": emit_python,
    "bin": emit_resource,
}

EXTENSIONS: Dict[str, str] = {
    "c": ".h",
    "rust": ".rs",
    "python": ".py",
    "bin": ".pxs",
}


def emit(bitmap: PackedBitmap, fmt: str, name: str) -> bytes:
    emitter = EMITTERS.get(fmt)
    if not emitter:
        raise ValueError("Supported formats: " + ", ".join(sorted(EMITTERS)))
    validate_symbol(name)
    return emitter(bitmap, name)
