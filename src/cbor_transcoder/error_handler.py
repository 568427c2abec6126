"""Error handling implementation for the CBOR transcoder."""

import logging
from typing import Optional

from .types import (
    ErrorHandlerInterface,
    ErrorKind,
    ErrorReport,
    JsonParseError,
    TranscodeError,
    ValidationError,
    ValidationResult,
)

# Each nesting level costs a few interpreter frames in the recursive codecs.
MAX_SAFE_DEPTH = 400

_SUGGESTED_ACTIONS = {
    ErrorKind.UNEXPECTED_EOF: "Input ended inside a CBOR item. Check that the whole document was read.",
    ErrorKind.INVALID_ADDITIONAL_INFO: "Input is not well-formed CBOR. If it is base64 text, pass --base64.",
    ErrorKind.UNEXPECTED_BREAK: "A break byte appeared outside an indefinite-length item.",
    ErrorKind.MALFORMED_INDEFINITE_STRING: "Indefinite-length strings may only hold definite chunks of the same type.",
    ErrorKind.INVALID_TEXT_STRING: "A CBOR text string holds invalid UTF-8. Use a byte string for binary data.",
    ErrorKind.DEPTH_EXCEEDED: "Raise --max-depth if the document is legitimately this deeply nested.",
    ErrorKind.TRAILING_DATA: "Only one value is processed per run. Split the input into separate documents.",
    ErrorKind.UNSUPPORTED_VALUE: "The value has no representation in the target format under the current options.",
    ErrorKind.SYNTAX_ERROR: "Fix the JSON syntax at the reported location.",
    ErrorKind.INVALID_ESCAPE: "Use a valid JSON escape; surrogate pairs must be complete.",
    ErrorKind.NON_STRING_MAP_KEY: "JSON object keys must be strings; only text and integer keys can be printed.",
    ErrorKind.INVALID_CHARACTER: "Input is not base64 text. Drop --base64 to read raw CBOR.",
    ErrorKind.INVALID_LENGTH: "Base64 input is truncated or wrongly padded.",
    ErrorKind.IO_ERROR: "Check that standard input and output are readable and writable.",
    ErrorKind.INVALID_OPTION: f"Choose a --max-depth between 1 and {MAX_SAFE_DEPTH}.",
}


class ErrorHandler(ErrorHandlerInterface):
    """
    Turns structured transcode errors into user-facing reports.

    Every error is terminal for a run; the handler only decides how it
    is described and logged.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize the error handler.

        Args:
            logger: Optional logger instance for error reporting
        """
        self.logger = logger or logging.getLogger(__name__)

    def handle_error(self, error: TranscodeError) -> ErrorReport:
        """
        Build a report for a failed run.

        Args:
            error: TranscodeError to handle

        Returns:
            ErrorReport with location and suggested action
        """
        self.logger.error(f"{error.category.value}: {error.kind.value} - {error}")

        return ErrorReport(
            kind=error.kind,
            category=error.category,
            message=error.message,
            location=self.describe_location(error),
            suggested_action=_SUGGESTED_ACTIONS.get(
                error.kind, "Unknown error kind. Please check logs and retry."
            ),
        )

    @staticmethod
    def describe_location(error: TranscodeError) -> Optional[str]:
        """Describe where in the input the error was detected, if known."""
        if isinstance(error, JsonParseError):
            return f"line {error.lineno}, column {error.colno}"
        if error.position is not None:
            return f"offset {error.position}"
        return None

    def format_report(self, report: ErrorReport) -> str:
        """
        Format a report for the error channel.

        Args:
            report: ErrorReport to format

        Returns:
            Two-line text: the error and a hint
        """
        line = f"error: {report.kind.value}: {report.message}"
        if report.location:
            line += f" ({report.location})"
        return f"{line}\nhint: {report.suggested_action}"

    def validate_max_depth(self, max_depth: int) -> ValidationResult:
        """
        Validate a nesting depth limit.

        Args:
            max_depth: Depth limit to validate

        Returns:
            ValidationResult with validation details
        """
        errors = []
        warnings = []

        if max_depth < 1:
            errors.append(ValidationError(
                kind=ErrorKind.INVALID_OPTION,
                message="Depth limit must be positive",
                location="max_depth"
            ))
        elif max_depth > MAX_SAFE_DEPTH:
            errors.append(ValidationError(
                kind=ErrorKind.INVALID_OPTION,
                message=f"Depth limit must not exceed {MAX_SAFE_DEPTH}",
                location="max_depth"
            ))
        elif max_depth < 8:
            warnings.append("Depth limit is very small (< 8). Ordinary documents may be rejected.")

        return ValidationResult(
            is_valid=len(errors) == 0,
            errors=errors,
            warnings=warnings
        )
