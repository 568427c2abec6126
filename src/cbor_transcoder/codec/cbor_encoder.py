"""CBOR encoder for the shared value model."""

import logging
import struct
from typing import Optional

from ..models.value import (
    MAX_UINT64,
    Array,
    Bool,
    ByteString,
    Float,
    Integer,
    Map,
    Null,
    Simple,
    Tag,
    TextString,
    Value,
)
from ..types import CborEncodeError, CborEncoderInterface, ErrorKind
from .constants import (
    FLOAT64,
    INFO_UINT8,
    INFO_UINT16,
    INFO_UINT32,
    INFO_UINT64,
    MAJOR_ARRAY,
    MAJOR_BYTES,
    MAJOR_MAP,
    MAJOR_NEGATIVE,
    MAJOR_SIMPLE,
    MAJOR_TAG,
    MAJOR_TEXT,
    MAJOR_UNSIGNED,
    SIMPLE_EXTENDED,
    SIMPLE_FALSE,
    SIMPLE_NULL,
    SIMPLE_TRUE,
)


def encode_head(major: int, argument: int) -> bytes:
    """
    Encode an initial byte plus argument using the shortest width.

    Args:
        major: Major type 0..7
        argument: Unsigned argument (value, length or tag number)

    Returns:
        Encoded head bytes
    """
    mt = major << 5
    if argument <= 23:
        return bytes([mt | argument])
    if argument <= 0xFF:
        return bytes([mt | INFO_UINT8, argument])
    if argument <= 0xFFFF:
        return struct.pack(">BH", mt | INFO_UINT16, argument)
    if argument <= 0xFFFFFFFF:
        return struct.pack(">BI", mt | INFO_UINT32, argument)
    return struct.pack(">BQ", mt | INFO_UINT64, argument)


class CborEncoder(CborEncoderInterface):
    """
    Encoder producing definite-length CBOR.

    Integers and lengths use the shortest argument width, floats are
    always written as 64-bit doubles and map pairs keep their stored
    order. Indefinite-length items are never produced.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def encode(self, value: Value) -> bytes:
        """
        Encode a value tree.

        Args:
            value: Value to encode

        Returns:
            CBOR bytes

        Raises:
            CborEncodeError: If the tree holds something CBOR cannot represent
        """
        buf = bytearray()
        self._encode_into(value, buf)
        self.logger.debug(f"Encoded {type(value).__name__} into {len(buf)} CBOR bytes")
        return bytes(buf)

    def _encode_into(self, value: Value, buf: bytearray) -> None:
        if isinstance(value, Null):
            buf.append((MAJOR_SIMPLE << 5) | SIMPLE_NULL)
        elif isinstance(value, Bool):
            buf.append((MAJOR_SIMPLE << 5) | (SIMPLE_TRUE if value.value else SIMPLE_FALSE))
        elif isinstance(value, Integer):
            buf += self._encode_integer(value.value)
        elif isinstance(value, Float):
            buf += struct.pack(">Bd", (MAJOR_SIMPLE << 5) | FLOAT64, value.value)
        elif isinstance(value, ByteString):
            buf += encode_head(MAJOR_BYTES, len(value.value))
            buf += value.value
        elif isinstance(value, TextString):
            try:
                raw = value.value.encode("utf-8")
            except UnicodeEncodeError as e:
                raise CborEncodeError(f"Text string is not valid Unicode: {e.reason}",
                                      ErrorKind.UNSUPPORTED_VALUE, context=value)
            buf += encode_head(MAJOR_TEXT, len(raw))
            buf += raw
        elif isinstance(value, Array):
            buf += encode_head(MAJOR_ARRAY, len(value.items))
            for item in value.items:
                self._encode_into(item, buf)
        elif isinstance(value, Map):
            buf += encode_head(MAJOR_MAP, len(value.pairs))
            for key, item in value.pairs:
                self._encode_into(key, buf)
                self._encode_into(item, buf)
        elif isinstance(value, Tag):
            buf += encode_head(MAJOR_TAG, value.number)
            self._encode_into(value.value, buf)
        elif isinstance(value, Simple):
            if value.code < 24:
                buf.append((MAJOR_SIMPLE << 5) | value.code)
            else:
                buf += bytes([(MAJOR_SIMPLE << 5) | SIMPLE_EXTENDED, value.code])
        else:
            raise CborEncodeError(
                f"Cannot encode {type(value).__name__} as CBOR",
                ErrorKind.UNSUPPORTED_VALUE,
            )

    def _encode_integer(self, number: int) -> bytes:
        if number >= 0:
            if number > MAX_UINT64:
                raise CborEncodeError(
                    f"Integer {number} exceeds the CBOR unsigned range",
                    ErrorKind.UNSUPPORTED_VALUE,
                )
            return encode_head(MAJOR_UNSIGNED, number)
        magnitude = -1 - number
        if magnitude > MAX_UINT64:
            raise CborEncodeError(
                f"Integer {number} exceeds the CBOR negative range",
                ErrorKind.UNSUPPORTED_VALUE,
            )
        return encode_head(MAJOR_NEGATIVE, magnitude)
