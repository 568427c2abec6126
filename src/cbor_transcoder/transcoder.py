"""Transcode pipeline connecting the CBOR and JSON codecs."""

import logging
from typing import Optional, Union

from .codec import CborDecoder, CborEncoder, JsonParser, JsonPrinter
from .codec.constants import DEFAULT_MAX_DEPTH
from .error_handler import ErrorHandler
from .profiler import PerformanceProfiler
from .types import (
    Base64Error,
    BytesPolicy,
    ErrorKind,
    JsonParseError,
    TranscodeError,
    TranscodeMode,
    TranscodeResult,
)
from .utils.base64_codec import Base64Codec


class CborTranscoder:
    """
    Converts one document per call between CBOR and JSON.

    Decode mode runs CBOR bytes (optionally base64 text) through the
    decoder and the JSON printer; encode mode runs JSON text through the
    parser and the CBOR encoder (optionally base64-encoding the result).
    The whole input is buffered and the whole output is returned at once.
    """

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH,
                 bytes_policy: BytesPolicy = BytesPolicy.BASE64,
                 compact: bool = False,
                 ensure_ascii: bool = False,
                 auto_detect_base64: bool = False,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the transcoder.

        Args:
            max_depth: Maximum nesting accepted when decoding, parsing and printing
            bytes_policy: How CBOR byte strings are rendered in JSON
            compact: Print ``{"k":"v"}`` instead of ``{"k": "v"}``
            ensure_ascii: Escape non-ASCII characters in JSON output
            auto_detect_base64: In decode mode, use base64 decoding whenever
                the input is valid base64 text
            logger: Optional logger instance

        Raises:
            ValueError: If max_depth is out of range
        """
        self.logger = logger or logging.getLogger(__name__)
        self.error_handler = ErrorHandler(self.logger)

        depth_validation = self.error_handler.validate_max_depth(max_depth)
        if not depth_validation.is_valid:
            raise ValueError("; ".join(error.message for error in depth_validation.errors))
        for warning in depth_validation.warnings:
            self.logger.warning(warning)

        self.max_depth = max_depth
        self.auto_detect_base64 = auto_detect_base64

        self.decoder = CborDecoder(max_depth=max_depth, logger=self.logger)
        self.encoder = CborEncoder(logger=self.logger)
        self.parser = JsonParser(max_depth=max_depth, logger=self.logger)
        self.printer = JsonPrinter(
            bytes_policy=bytes_policy,
            compact=compact,
            ensure_ascii=ensure_ascii,
            max_depth=max_depth,
            logger=self.logger
        )
        self.profiler = PerformanceProfiler(self.logger)

    def cbor_to_json(self, data: bytes, base64_input: bool = False) -> str:
        """
        Decode mode: CBOR bytes to JSON text.

        Args:
            data: CBOR bytes, or base64 text when base64_input is set
            base64_input: Decode the input from base64 first

        Returns:
            JSON text

        Raises:
            TranscodeError: On any base64, CBOR or printing failure
        """
        if base64_input:
            data = Base64Codec.decode(data)
        elif self.auto_detect_base64:
            try:
                data = Base64Codec.decode(data)
                self.logger.info("Input detected as base64 text")
            except Base64Error:
                self.logger.info("Input is not base64 text, decoding as raw CBOR")

        value = self.decoder.decode(data)
        return self.printer.print(value)

    def json_to_cbor(self, text: Union[str, bytes], base64_output: bool = False) -> Union[bytes, str]:
        """
        Encode mode: JSON text to CBOR bytes.

        Args:
            text: JSON text, or its UTF-8 bytes
            base64_output: Return base64 text instead of raw bytes

        Returns:
            CBOR bytes, or unpadded base64 text when base64_output is set

        Raises:
            TranscodeError: On any parse or encode failure
        """
        if isinstance(text, (bytes, bytearray, memoryview)):
            text = self._decode_utf8(bytes(text))

        value = self.parser.parse(text)
        cbor = self.encoder.encode(value)
        if base64_output:
            return Base64Codec.encode(cbor)
        return cbor

    def run(self, mode: TranscodeMode, data: Union[bytes, str], base64: bool = False) -> TranscodeResult:
        """
        Run one transcode and collect the outcome.

        Args:
            mode: Direction of the transcode
            data: Whole input buffer
            base64: Route the CBOR side through base64

        Returns:
            TranscodeResult; failures carry formatted error reports
        """
        input_size = len(data.encode("utf-8", "surrogatepass")) if isinstance(data, str) else len(data)
        self.logger.info(f"Starting {mode.value} of {input_size} bytes (base64={base64})")

        try:
            with self.profiler.profile_operation(mode.value, input_size) as outcome:
                if mode == TranscodeMode.DECODE:
                    if isinstance(data, str):
                        data = data.encode("utf-8", "surrogatepass")
                    output = self.cbor_to_json(data, base64_input=base64)
                    output_size = len(output.encode("utf-8"))
                else:
                    output = self.json_to_cbor(data, base64_output=base64)
                    output_size = len(output)
                outcome["output_size"] = output_size
        except TranscodeError as e:
            report = self.error_handler.handle_error(e)
            return TranscodeResult(
                success=False,
                mode=mode,
                output=None,
                input_size=input_size,
                output_size=0,
                errors=[self.error_handler.format_report(report)]
            )

        return TranscodeResult(
            success=True,
            mode=mode,
            output=output,
            input_size=input_size,
            output_size=output_size
        )

    @staticmethod
    def _decode_utf8(raw: bytes) -> str:
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            lineno = raw.count(b"\n", 0, e.start) + 1
            colno = e.start - raw.rfind(b"\n", 0, e.start)
            raise JsonParseError(f"Input is not valid UTF-8: {e.reason}",
                                 ErrorKind.SYNTAX_ERROR, e.start, lineno, colno)
