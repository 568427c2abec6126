"""Tests for the performance profiler."""

import pytest
from cbor_transcoder.profiler import PerformanceProfiler


class TestPerformanceProfiler:
    """Tests for PerformanceProfiler class."""

    def setup_method(self):
        """Set up test fixtures."""
        self.profiler = PerformanceProfiler()

    def test_profile_operation(self):
        """Test recording a successful operation."""
        with self.profiler.profile_operation("decode", 100) as outcome:
            outcome["output_size"] = 50

        metrics = self.profiler.metrics_history[-1]
        assert metrics.operation_name == "decode"
        assert metrics.input_size == 100
        assert metrics.output_size == 50
        assert metrics.size_ratio == 0.5
        assert metrics.succeeded
        assert metrics.duration >= 0
        assert metrics.memory_start_mb > 0

    def test_failed_operation_is_recorded(self):
        """Test that exceptions propagate and are recorded as failures."""
        with pytest.raises(RuntimeError):
            with self.profiler.profile_operation("encode", 10):
                raise RuntimeError("boom")

        assert not self.profiler.metrics_history[-1].succeeded
        assert self.profiler.current_operation is None

    def test_stop_without_start(self):
        """Test stopping with no active session."""
        with pytest.raises(ValueError, match="No active profiling session"):
            self.profiler.stop_profiling()

    def test_summary(self):
        """Test the aggregated summary."""
        assert self.profiler.get_performance_summary() == {"total_operations": 0}

        with self.profiler.profile_operation("decode", 10) as outcome:
            outcome["output_size"] = 20
        with self.profiler.profile_operation("encode", 5) as outcome:
            outcome["output_size"] = 4

        summary = self.profiler.get_performance_summary()
        assert summary["total_operations"] == 2
        assert summary["failed_operations"] == 0
        assert summary["total_input_bytes"] == 15
        assert summary["total_output_bytes"] == 24
        assert [op["name"] for op in summary["operations"]] == ["decode", "encode"]
