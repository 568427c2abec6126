"""Base64 transport encoding for CBOR bytes."""

import base64
import binascii
import re
from typing import Union

from ..types import Base64Error, ErrorKind

_INVALID_CHAR = re.compile(r"[^A-Za-z0-9+/\-_=]")
_URLSAFE_TO_STANDARD = str.maketrans("-_", "+/")


class Base64Codec:
    """
    Base64 encoding and decoding of byte buffers.

    Output uses the standard alphabet without padding unless asked
    otherwise. Input may use either the standard or the URL-safe
    alphabet, with or without padding.
    """

    @staticmethod
    def encode(data: bytes, url_safe: bool = False, padded: bool = False) -> str:
        """
        Encode bytes as base64 text.

        Args:
            data: Bytes to encode
            url_safe: Use the URL-safe alphabet (``-`` and ``_``)
            padded: Keep trailing ``=`` padding

        Returns:
            Base64 text
        """
        encoded = base64.urlsafe_b64encode(data) if url_safe else base64.b64encode(data)
        text = encoded.decode("ascii")
        return text if padded else text.rstrip("=")

    @staticmethod
    def decode(text: Union[str, bytes]) -> bytes:
        """
        Decode base64 text.

        Args:
            text: Base64 text or its ASCII bytes; surrounding whitespace is ignored

        Returns:
            Decoded bytes

        Raises:
            Base64Error: On characters outside both alphabets or an
                impossible length
        """
        if isinstance(text, (bytes, bytearray, memoryview)):
            try:
                text = bytes(text).decode("ascii")
            except UnicodeDecodeError as e:
                raise Base64Error("Non-ASCII byte in base64 input",
                                  ErrorKind.INVALID_CHARACTER, e.start)

        leading = len(text) - len(text.lstrip())
        stripped = text.strip()

        m = _INVALID_CHAR.search(stripped)
        if m:
            raise Base64Error(f"Invalid base64 character {m.group(0)!r}",
                              ErrorKind.INVALID_CHARACTER, leading + m.start())

        body = stripped.rstrip("=")
        padding = len(stripped) - len(body)
        if "=" in body:
            raise Base64Error("Padding inside base64 data", ErrorKind.INVALID_LENGTH,
                              leading + body.index("="))
        if padding > 2 or len(body) % 4 == 1 or (padding and len(stripped) % 4):
            raise Base64Error(f"Invalid base64 length {len(stripped)}",
                              ErrorKind.INVALID_LENGTH)

        standard = body.translate(_URLSAFE_TO_STANDARD)
        standard += "=" * (-len(standard) % 4)
        try:
            return base64.b64decode(standard, validate=True)
        except binascii.Error as e:
            raise Base64Error(f"Invalid base64 data: {e}", ErrorKind.INVALID_CHARACTER)
