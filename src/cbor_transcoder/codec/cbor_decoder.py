"""CBOR decoder producing the shared value model."""

import logging
import struct
from typing import Optional

from ..models.value import (
    NULL,
    UNDEFINED,
    Array,
    Bool,
    ByteString,
    Float,
    Integer,
    Map,
    Simple,
    Tag,
    TextString,
    Value,
)
from ..types import CborDecodeError, CborDecoderInterface, ErrorKind
from .constants import (
    ARGUMENT_WIDTHS,
    BREAK,
    DEFAULT_MAX_DEPTH,
    FLOAT16,
    FLOAT32,
    FLOAT64,
    INFO_INDEFINITE,
    MAJOR_ARRAY,
    MAJOR_BYTES,
    MAJOR_MAP,
    MAJOR_NEGATIVE,
    MAJOR_SIMPLE,
    MAJOR_TAG,
    MAJOR_TEXT,
    MAJOR_TYPE_NAMES,
    MAJOR_UNSIGNED,
    SIMPLE_EXTENDED,
    SIMPLE_FALSE,
    SIMPLE_NULL,
    SIMPLE_TRUE,
    SIMPLE_UNDEFINED,
)

_FLOAT_FORMATS = {
    FLOAT16: ">e",
    FLOAT32: ">f",
    FLOAT64: ">d",
}


class _Cursor:
    """Read position over an immutable input buffer."""

    __slots__ = ("data", "offset")

    def __init__(self, data: bytes):
        self.data = data
        self.offset = 0

    def remaining(self) -> int:
        return len(self.data) - self.offset

    def peek(self) -> int:
        if self.offset >= len(self.data):
            raise CborDecodeError("Unexpected end of input", ErrorKind.UNEXPECTED_EOF,
                                  self.offset)
        return self.data[self.offset]

    def read_byte(self) -> int:
        byte = self.peek()
        self.offset += 1
        return byte

    def read(self, length: int) -> bytes:
        if length > self.remaining():
            raise CborDecodeError(
                f"Unexpected end of input: needed {length} bytes, "
                f"{self.remaining()} available",
                ErrorKind.UNEXPECTED_EOF,
                self.offset,
            )
        chunk = self.data[self.offset:self.offset + length]
        self.offset += length
        return chunk


class CborDecoder(CborDecoderInterface):
    """
    Decoder for a single CBOR data item.

    Accepts definite and indefinite length items, passes tags through
    opaquely and bounds container nesting with an explicit depth counter.
    """

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the decoder.

        Args:
            max_depth: Maximum nesting of arrays, maps and tags
            logger: Optional logger instance
        """
        if max_depth < 1:
            raise ValueError("max_depth must be positive")
        self.max_depth = max_depth
        self.logger = logger or logging.getLogger(__name__)

    def decode(self, data: bytes) -> Value:
        """
        Decode exactly one CBOR data item.

        Args:
            data: Raw CBOR bytes

        Returns:
            Decoded value

        Raises:
            CborDecodeError: If the input is malformed, truncated, too deeply
                nested or followed by extra bytes
        """
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError(f"CBOR input must be bytes, got {type(data).__name__}")

        cursor = _Cursor(bytes(data))
        try:
            value = self._decode_item(cursor, 0)
        except RecursionError:
            raise CborDecodeError("Nesting too deep for the interpreter stack",
                                  ErrorKind.DEPTH_EXCEEDED, cursor.offset)

        if cursor.remaining():
            raise CborDecodeError(
                f"{cursor.remaining()} trailing bytes after the data item",
                ErrorKind.TRAILING_DATA,
                cursor.offset,
            )

        self.logger.debug(f"Decoded {len(cursor.data)} CBOR bytes into {type(value).__name__}")
        return value

    def _decode_item(self, cursor: _Cursor, depth: int) -> Value:
        start = cursor.offset
        initial = cursor.read_byte()
        major = initial >> 5
        info = initial & 0x1F

        if major == MAJOR_SIMPLE:
            return self._decode_simple(cursor, info, start)

        if info == INFO_INDEFINITE:
            if major in (MAJOR_BYTES, MAJOR_TEXT):
                return self._decode_indefinite_string(cursor, major, start)
            if major == MAJOR_ARRAY:
                self._check_depth(depth, start)
                return self._decode_indefinite_array(cursor, depth)
            if major == MAJOR_MAP:
                self._check_depth(depth, start)
                return self._decode_indefinite_map(cursor, depth)
            raise CborDecodeError(
                f"Indefinite length is not allowed for {MAJOR_TYPE_NAMES[major]}",
                ErrorKind.INVALID_ADDITIONAL_INFO,
                start,
            )

        argument = self._read_argument(cursor, info, start)

        if major == MAJOR_UNSIGNED:
            return Integer(argument)
        elif major == MAJOR_NEGATIVE:
            return Integer(-1 - argument)
        elif major == MAJOR_BYTES:
            return ByteString(cursor.read(argument))
        elif major == MAJOR_TEXT:
            return TextString(self._decode_text(cursor.read(argument), cursor.offset - argument))
        elif major == MAJOR_ARRAY:
            self._check_depth(depth, start)
            items = [self._decode_item(cursor, depth + 1) for _ in range(argument)]
            return Array(tuple(items))
        elif major == MAJOR_MAP:
            self._check_depth(depth, start)
            pairs = []
            for _ in range(argument):
                key = self._decode_item(cursor, depth + 1)
                pairs.append((key, self._decode_item(cursor, depth + 1)))
            return Map(tuple(pairs))
        else:  # MAJOR_TAG
            self._check_depth(depth, start)
            return Tag(argument, self._decode_item(cursor, depth + 1))

    def _read_argument(self, cursor: _Cursor, info: int, start: int) -> int:
        """Read the unsigned argument that follows an initial byte."""
        if info < 24:
            return info
        width = ARGUMENT_WIDTHS.get(info)
        if width is None:
            raise CborDecodeError(
                f"Reserved additional info value {info}",
                ErrorKind.INVALID_ADDITIONAL_INFO,
                start,
            )
        return int.from_bytes(cursor.read(width), "big")

    def _check_depth(self, depth: int, start: int) -> None:
        if depth >= self.max_depth:
            raise CborDecodeError(
                f"Nesting depth exceeds the limit of {self.max_depth}",
                ErrorKind.DEPTH_EXCEEDED,
                start,
            )

    def _decode_text(self, raw: bytes, start: int) -> str:
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise CborDecodeError(
                f"Invalid UTF-8 in text string: {e.reason}",
                ErrorKind.INVALID_TEXT_STRING,
                start + e.start,
            )

    def _decode_indefinite_string(self, cursor: _Cursor, major: int, start: int) -> Value:
        """Concatenate definite-length chunks until a break byte."""
        chunks = []
        while cursor.peek() != BREAK:
            chunk_start = cursor.offset
            initial = cursor.read_byte()
            chunk_major = initial >> 5
            chunk_info = initial & 0x1F
            if chunk_major != major:
                raise CborDecodeError(
                    f"Chunk of type {MAJOR_TYPE_NAMES[chunk_major]} inside an "
                    f"indefinite-length {MAJOR_TYPE_NAMES[major]}",
                    ErrorKind.MALFORMED_INDEFINITE_STRING,
                    chunk_start,
                )
            if chunk_info == INFO_INDEFINITE:
                raise CborDecodeError(
                    "Nested indefinite-length chunk",
                    ErrorKind.MALFORMED_INDEFINITE_STRING,
                    chunk_start,
                )
            length = self._read_argument(cursor, chunk_info, chunk_start)
            raw = cursor.read(length)
            if major == MAJOR_TEXT:
                chunks.append(self._decode_text(raw, cursor.offset - length))
            else:
                chunks.append(raw)
        cursor.read_byte()  # break

        if major == MAJOR_TEXT:
            return TextString("".join(chunks))
        return ByteString(b"".join(chunks))

    def _decode_indefinite_array(self, cursor: _Cursor, depth: int) -> Array:
        items = []
        while cursor.peek() != BREAK:
            items.append(self._decode_item(cursor, depth + 1))
        cursor.read_byte()
        return Array(tuple(items))

    def _decode_indefinite_map(self, cursor: _Cursor, depth: int) -> Map:
        pairs = []
        while cursor.peek() != BREAK:
            key = self._decode_item(cursor, depth + 1)
            pairs.append((key, self._decode_item(cursor, depth + 1)))
        cursor.read_byte()
        return Map(tuple(pairs))

    def _decode_simple(self, cursor: _Cursor, info: int, start: int) -> Value:
        """Decode a major type 7 item."""
        if info == SIMPLE_FALSE:
            return Bool(False)
        elif info == SIMPLE_TRUE:
            return Bool(True)
        elif info == SIMPLE_NULL:
            return NULL
        elif info == SIMPLE_UNDEFINED:
            return UNDEFINED
        elif info < SIMPLE_FALSE:
            return Simple(info)
        elif info == SIMPLE_EXTENDED:
            code = cursor.read_byte()
            if code < 32:
                raise CborDecodeError(
                    f"Two-byte encoding of simple value {code} is not well-formed",
                    ErrorKind.INVALID_ADDITIONAL_INFO,
                    start,
                )
            return Simple(code)
        elif info in _FLOAT_FORMATS:
            fmt = _FLOAT_FORMATS[info]
            (number,) = struct.unpack(fmt, cursor.read(struct.calcsize(fmt)))
            return Float(float(number))
        elif info == INFO_INDEFINITE:
            raise CborDecodeError(
                "Break byte outside an indefinite-length item",
                ErrorKind.UNEXPECTED_BREAK,
                start,
            )
        raise CborDecodeError(
            f"Reserved additional info value {info}",
            ErrorKind.INVALID_ADDITIONAL_INFO,
            start,
        )
