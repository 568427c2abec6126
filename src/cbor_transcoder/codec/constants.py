"""CBOR wire constants (RFC 8949 section 3)."""

MAJOR_UNSIGNED = 0
MAJOR_NEGATIVE = 1
MAJOR_BYTES = 2
MAJOR_TEXT = 3
MAJOR_ARRAY = 4
MAJOR_MAP = 5
MAJOR_TAG = 6
MAJOR_SIMPLE = 7

MAJOR_TYPE_NAMES = {
    MAJOR_UNSIGNED: "unsigned integer",
    MAJOR_NEGATIVE: "negative integer",
    MAJOR_BYTES: "byte string",
    MAJOR_TEXT: "text string",
    MAJOR_ARRAY: "array",
    MAJOR_MAP: "map",
    MAJOR_TAG: "tag",
    MAJOR_SIMPLE: "simple/float",
}

# Additional info
INFO_UINT8 = 24
INFO_UINT16 = 25
INFO_UINT32 = 26
INFO_UINT64 = 27
INFO_INDEFINITE = 31

ARGUMENT_WIDTHS = {
    INFO_UINT8: 1,
    INFO_UINT16: 2,
    INFO_UINT32: 4,
    INFO_UINT64: 8,
}

# Major type 7
SIMPLE_FALSE = 20
SIMPLE_TRUE = 21
SIMPLE_NULL = 22
SIMPLE_UNDEFINED = 23
SIMPLE_EXTENDED = 24
FLOAT16 = 25
FLOAT32 = 26
FLOAT64 = 27

BREAK = 0xFF

DEFAULT_MAX_DEPTH = 256
