"""
CBOR Transcoder - Bidirectional CBOR/JSON conversion tool.

Decodes CBOR (optionally base64-wrapped) into JSON text and encodes
JSON text back into definite-length CBOR.
"""

from .transcoder import CborTranscoder
from .codec import CborDecoder, CborEncoder, JsonParser, JsonPrinter
from .models import Value, from_python
from .types import (
    BytesPolicy,
    TranscodeMode,
    TranscodeResult,
    TranscodeError,
    CborDecodeError,
    CborEncodeError,
    JsonParseError,
    JsonPrintError,
    Base64Error,
    ErrorKind,
)

__version__ = "1.0.0"
__all__ = [
    "CborTranscoder",
    "CborDecoder",
    "CborEncoder",
    "JsonParser",
    "JsonPrinter",
    "Value",
    "from_python",
    "BytesPolicy",
    "TranscodeMode",
    "TranscodeResult",
    "TranscodeError",
    "CborDecodeError",
    "CborEncodeError",
    "JsonParseError",
    "JsonPrintError",
    "Base64Error",
    "ErrorKind",
]
