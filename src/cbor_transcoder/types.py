"""Core type definitions for the CBOR transcoder."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, Union


class TranscodeMode(Enum):
    """Direction of a transcode run."""
    DECODE = "decode"
    ENCODE = "encode"


class BytesPolicy(Enum):
    """How byte strings are rendered in JSON output."""
    BASE64 = "base64"
    BASE64URL = "base64url"
    REJECT = "reject"


class ErrorCategory(Enum):
    """Enumeration of error families."""
    CBOR_DECODE = "CborDecodeError"
    CBOR_ENCODE = "CborEncodeError"
    JSON_PARSE = "JsonParseError"
    JSON_PRINT = "JsonPrintError"
    BASE64 = "Base64Error"
    IO = "IoError"


class ErrorKind(Enum):
    """Enumeration of error kinds."""
    UNEXPECTED_EOF = "UnexpectedEof"
    INVALID_ADDITIONAL_INFO = "InvalidAdditionalInfo"
    UNEXPECTED_BREAK = "UnexpectedBreak"
    MALFORMED_INDEFINITE_STRING = "MalformedIndefiniteString"
    INVALID_TEXT_STRING = "InvalidTextString"
    DEPTH_EXCEEDED = "DepthExceeded"
    TRAILING_DATA = "TrailingData"
    UNSUPPORTED_VALUE = "UnsupportedValue"
    SYNTAX_ERROR = "SyntaxError"
    INVALID_ESCAPE = "InvalidEscape"
    NON_STRING_MAP_KEY = "NonStringMapKey"
    INVALID_CHARACTER = "InvalidCharacter"
    INVALID_LENGTH = "InvalidLength"
    IO_ERROR = "IoError"
    INVALID_OPTION = "InvalidOption"


class TranscodeError(Exception):
    """Base exception for every transcoder failure."""

    category = ErrorCategory.IO

    def __init__(self, message: str, kind: ErrorKind,
                 position: Optional[int] = None, context: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.position = position
        self.context = context

    def __str__(self) -> str:
        if self.position is None:
            return self.message
        return f"{self.message} (at offset {self.position})"


class CborDecodeError(TranscodeError):
    """Raised when CBOR bytes cannot be decoded."""
    category = ErrorCategory.CBOR_DECODE


class CborEncodeError(TranscodeError):
    """Raised when a value cannot be encoded as CBOR."""
    category = ErrorCategory.CBOR_ENCODE


class JsonParseError(TranscodeError):
    """Raised when JSON text cannot be parsed."""

    category = ErrorCategory.JSON_PARSE

    def __init__(self, message: str, kind: ErrorKind, position: int,
                 lineno: int = 1, colno: int = 1, context: Optional[Any] = None):
        super().__init__(message, kind, position, context)
        self.lineno = lineno
        self.colno = colno

    def __str__(self) -> str:
        return f"{self.message} at line {self.lineno}, column {self.colno}"


class JsonPrintError(TranscodeError):
    """Raised when a value has no JSON rendering under the active policy."""
    category = ErrorCategory.JSON_PRINT


class Base64Error(TranscodeError):
    """Raised when base64 text cannot be decoded."""
    category = ErrorCategory.BASE64


class TranscodeIOError(TranscodeError):
    """Raised when reading input or writing output fails."""
    category = ErrorCategory.IO


@dataclass
class TranscodeResult:
    """Result of a transcode run."""
    success: bool
    mode: TranscodeMode
    output: Union[bytes, str, None]
    input_size: int
    output_size: int
    errors: Optional[List[str]] = None


@dataclass
class ValidationError:
    """Validation error details."""
    kind: ErrorKind
    message: str
    location: Optional[str] = None


@dataclass
class ValidationResult:
    """Result of option validation."""
    is_valid: bool
    errors: List[ValidationError]
    warnings: List[str]


@dataclass
class ErrorReport:
    """User-facing description of a failed run."""
    kind: ErrorKind
    category: ErrorCategory
    message: str
    location: Optional[str] = None
    suggested_action: str = ""


# Abstract base classes for interfaces

class CborDecoderInterface(ABC):
    """Abstract interface for the CBOR decoder."""

    @abstractmethod
    def decode(self, data: bytes) -> "Value":
        """Decode exactly one CBOR data item."""
        pass


class CborEncoderInterface(ABC):
    """Abstract interface for the CBOR encoder."""

    @abstractmethod
    def encode(self, value: "Value") -> bytes:
        """Encode a value as definite-length CBOR."""
        pass


class JsonParserInterface(ABC):
    """Abstract interface for the JSON parser."""

    @abstractmethod
    def parse(self, text: str) -> "Value":
        """Parse exactly one JSON value."""
        pass


class JsonPrinterInterface(ABC):
    """Abstract interface for the JSON printer."""

    @abstractmethod
    def print(self, value: "Value") -> str:
        """Render a value as JSON text."""
        pass


class ErrorHandlerInterface(ABC):
    """Abstract interface for error handling."""

    @abstractmethod
    def handle_error(self, error: TranscodeError) -> ErrorReport:
        """Turn a transcode error into a report."""
        pass

    @abstractmethod
    def validate_max_depth(self, max_depth: int) -> ValidationResult:
        """Validate a nesting depth limit."""
        pass
