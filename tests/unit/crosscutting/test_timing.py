"""
Name: Stage Timings Unit Tests
"""

import pytest

from grounded_rag.crosscutting.timing import StageTimings, Timer


@pytest.mark.unit
class TestStageTimings:
    def test_measure_records_stage(self):
        timings = StageTimings()

        with timings.measure("embed"):
            pass

        result = timings.to_dict()
        assert "embed_ms" in result
        assert "embed_calls" not in result
        assert result["total_ms"] >= 0

    def test_repeated_stage_accumulates_and_counts(self):
        timings = StageTimings()
        timings.record("llm", 1.5)
        timings.record("llm", 2.25)

        result = timings.to_dict()

        assert result["llm_ms"] == 3.75
        assert result["llm_calls"] == 2
        assert timings.calls("llm") == 2
        assert timings.calls("embed") == 0

    def test_stage_recorded_even_on_error(self):
        timings = StageTimings()

        with pytest.raises(ValueError):
            with timings.measure("retrieve"):
                raise ValueError("x")

        assert timings.calls("retrieve") == 1


@pytest.mark.unit
class TestTimer:
    def test_stop_without_start(self):
        with pytest.raises(RuntimeError):
            Timer().stop()

    def test_elapsed_is_zero_before_start(self):
        assert Timer().elapsed_ms == 0.0
