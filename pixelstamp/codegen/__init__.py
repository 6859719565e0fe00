from .emitters import (
    EMITTERS,
    EXTENSIONS,
    emit,
    emit_c,
    emit_python,
    emit_resource,
    emit_rust,
    symbol_name,
    validate_symbol,
)
from .resource import crc8_value, load_stamp, pack_resource, unpack_resource

__all__ = [
    "crc8_value",
    "emit",
    "emit_c",
    "emit_python",
    "emit_resource",
    "emit_rust",
    "EMITTERS",
    "EXTENSIONS",
    "load_stamp",
    "pack_resource",
    "symbol_name",
    "unpack_resource",
    "validate_symbol",
]
