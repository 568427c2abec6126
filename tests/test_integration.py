"""Integration tests for the CBOR transcoder."""

import pytest
from cbor_transcoder import CborTranscoder
from cbor_transcoder.types import (
    BytesPolicy,
    CborDecodeError,
    ErrorKind,
    JsonParseError,
    TranscodeMode,
)


class TestCborTranscoderIntegration:
    """Integration tests for the complete decode and encode pipelines."""

    def setup_method(self):
        """Set up test fixtures."""
        self.transcoder = CborTranscoder()

    def test_decode_key_value(self, key_value_cbor):
        """Test the one-entry map decodes to the documented JSON."""
        assert self.transcoder.cbor_to_json(key_value_cbor) == '{"key": "value"}'

    def test_decode_key_value_base64(self, key_value_base64):
        """Test the base64 form decodes to identical JSON."""
        json_text = self.transcoder.cbor_to_json(key_value_base64.encode("ascii"), base64_input=True)

        assert json_text == '{"key": "value"}'

    def test_encode_key_value(self, key_value_cbor, key_value_base64):
        """Test encoding the documented JSON back to CBOR and base64."""
        assert self.transcoder.json_to_cbor('{"key": "value"}') == key_value_cbor
        assert self.transcoder.json_to_cbor('{"key": "value"}', base64_output=True) == key_value_base64

    def test_encode_accepts_utf8_bytes(self):
        """Test JSON supplied as bytes."""
        assert self.transcoder.json_to_cbor('"é"'.encode("utf-8")) == b"\x62\xc3\xa9"

    def test_encode_rejects_invalid_utf8(self):
        """Test JSON bytes that are not UTF-8."""
        with pytest.raises(JsonParseError) as exc_info:
            self.transcoder.json_to_cbor(b'"\xff"')

        assert exc_info.value.kind == ErrorKind.SYNTAX_ERROR
        assert exc_info.value.position == 1

    def test_integer_float_round_trip(self):
        """Test that 42 and 42.0 survive JSON -> CBOR -> JSON."""
        cbor_int = self.transcoder.json_to_cbor("42")
        cbor_float = self.transcoder.json_to_cbor("42.0")

        assert cbor_int[0] >> 5 == 0
        assert cbor_float[0] == 0xFB
        assert self.transcoder.cbor_to_json(cbor_int) == "42"
        assert self.transcoder.cbor_to_json(cbor_float) == "42.0"

    def test_document_round_trip(self, mixed_json):
        """Test a mixed document through both pipelines."""
        transcoder = CborTranscoder(compact=True)

        cbor = transcoder.json_to_cbor(mixed_json)

        assert transcoder.cbor_to_json(cbor) == mixed_json

    def test_map_order_preserved(self):
        """Test that CBOR key order reaches the JSON text."""
        cbor = bytes.fromhex("a3626b3303626b3101626b3202")

        assert self.transcoder.cbor_to_json(cbor) == '{"k3": 3,"k1": 1,"k2": 2}'

    def test_nested_document(self, nested_cbor):
        """Test a nested document."""
        assert self.transcoder.cbor_to_json(nested_cbor) == '{"a": [1,-2,3.5],"b": {"c": null}}'

    def test_auto_detect_base64(self, key_value_cbor, key_value_base64):
        """Test that auto-detection handles both raw and base64 input."""
        transcoder = CborTranscoder(auto_detect_base64=True)

        assert transcoder.cbor_to_json(key_value_cbor) == '{"key": "value"}'
        assert transcoder.cbor_to_json(key_value_base64.encode("ascii") + b"\n") == '{"key": "value"}'

    def test_bytes_policy_reject(self):
        """Test that byte strings can be refused."""
        transcoder = CborTranscoder(bytes_policy=BytesPolicy.REJECT)

        result = transcoder.run(TranscodeMode.DECODE, bytes.fromhex("420102"))

        assert not result.success
        assert "UnsupportedValue" in result.errors[0]

    def test_truncated_input(self):
        """Test that a truncated map raises UnexpectedEof."""
        with pytest.raises(CborDecodeError) as exc_info:
            self.transcoder.cbor_to_json(b"\xa1")

        assert exc_info.value.kind == ErrorKind.UNEXPECTED_EOF

    def test_invalid_max_depth(self):
        """Test that out-of-range depth limits are refused."""
        with pytest.raises(ValueError, match="Depth limit"):
            CborTranscoder(max_depth=0)


class TestTranscodeRun:
    """Tests for CborTranscoder.run."""

    def setup_method(self):
        """Set up test fixtures."""
        self.transcoder = CborTranscoder()

    def test_run_decode(self, key_value_cbor):
        """Test a successful decode run."""
        result = self.transcoder.run(TranscodeMode.DECODE, key_value_cbor)

        assert result.success
        assert result.output == '{"key": "value"}'
        assert result.input_size == len(key_value_cbor)
        assert result.output_size == 16
        assert result.errors is None

    def test_run_encode_base64(self, key_value_base64):
        """Test a successful base64 encode run."""
        result = self.transcoder.run(TranscodeMode.ENCODE, b'{"key": "value"}', base64=True)

        assert result.success
        assert result.output == key_value_base64

    def test_run_failure_reports(self):
        """Test that failures are reported, not raised."""
        result = self.transcoder.run(TranscodeMode.ENCODE, '{"key": "value')

        assert not result.success
        assert result.output is None
        assert "SyntaxError" in result.errors[0]
        assert "line 1, column 9" in result.errors[0]

    def test_run_surrogate_text_reports(self):
        """Test that text which is not valid Unicode fails as a report, not an exception."""
        result = self.transcoder.run(TranscodeMode.ENCODE, '"\ud800"')

        assert not result.success
        assert "SyntaxError" in result.errors[0]

    def test_run_records_metrics(self, key_value_cbor):
        """Test that every run is profiled, including failures."""
        self.transcoder.run(TranscodeMode.DECODE, key_value_cbor)
        self.transcoder.run(TranscodeMode.DECODE, b"\xa1")

        summary = self.transcoder.profiler.get_performance_summary()

        assert summary["total_operations"] == 2
        assert summary["failed_operations"] == 1
