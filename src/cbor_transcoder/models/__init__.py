"""Data models for the CBOR transcoder."""

from .value import (
    Value,
    Null,
    Bool,
    Integer,
    Float,
    ByteString,
    TextString,
    Array,
    Map,
    Tag,
    Simple,
    NULL,
    UNDEFINED,
    from_python,
)

__all__ = [
    "Value",
    "Null",
    "Bool",
    "Integer",
    "Float",
    "ByteString",
    "TextString",
    "Array",
    "Map",
    "Tag",
    "Simple",
    "NULL",
    "UNDEFINED",
    "from_python",
]
