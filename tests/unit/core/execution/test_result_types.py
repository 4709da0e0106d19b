"""Tests for panel execution result types."""

import pytest

from expert_panel.core.execution.result_types import (
    NO_RESPONSE_PLACEHOLDER,
    BatchResult,
    InvocationResult,
    PanelSummary,
)


class TestInvocationResult:
    """Test the per-expert result record."""

    def test_success_keeps_content(self) -> None:
        result = InvocationResult.success("Physics Expert", "Energy.", 1.2)

        assert result.succeeded
        assert result.output_text == "Energy."
        assert result.error_message is None
        assert result.duration == 1.2

    @pytest.mark.parametrize("content", [None, ""])
    def test_success_without_content_uses_placeholder(
        self, content: str | None
    ) -> None:
        result = InvocationResult.success("Physics Expert", content, 0.5)

        assert result.succeeded
        assert result.output_text == NO_RESPONSE_PLACEHOLDER

    def test_failure_prefixes_output(self) -> None:
        result = InvocationResult.failure("Chemistry Expert", "rate limited", 0.3)

        assert not result.succeeded
        assert result.output_text == "Error: rate limited"
        assert result.error_message == "rate limited"

    def test_negative_duration_rejected(self) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            InvocationResult.success("x", "y", -0.1)

    def test_failed_result_requires_error_message(self) -> None:
        with pytest.raises(ValueError, match="required"):
            InvocationResult("x", "Error: ", succeeded=False, duration=0.0)

    def test_successful_result_rejects_error_message(self) -> None:
        with pytest.raises(ValueError, match="must be None"):
            InvocationResult(
                "x", "ok", succeeded=True, duration=0.0, error_message="boom"
            )

    def test_to_dict(self) -> None:
        ok = InvocationResult.success("a", "answer", 1.23456)
        bad = InvocationResult.failure("b", "boom", 0.5)

        assert ok.to_dict() == {
            "responder": "a",
            "status": "success",
            "output": "answer",
            "duration_seconds": 1.235,
        }
        assert bad.to_dict()["status"] == "failed"
        assert bad.to_dict()["error"] == "boom"


class TestBatchResult:
    """Test the ordered batch container."""

    def test_sequence_behaviour(self) -> None:
        first = InvocationResult.success("a", "1", 0.1)
        second = InvocationResult.failure("b", "boom", 0.2)
        batch = BatchResult(results=[first, second])

        assert len(batch) == 2
        assert batch[0] is first
        assert list(batch) == [first, second]
        assert batch.succeeded == [first]
        assert batch.failed == [second]

    def test_total_elapsed_is_longest_duration(self) -> None:
        batch = BatchResult(
            results=[
                InvocationResult.success("a", "1", 1.2),
                InvocationResult.success("b", "2", 1.4),
            ],
            wall_clock=1.45,
        )

        assert batch.total_elapsed == pytest.approx(1.4)

    def test_empty_batch_total_is_zero(self) -> None:
        assert BatchResult().total_elapsed == 0.0

    def test_to_dict_includes_wall_clock(self) -> None:
        batch = BatchResult(
            results=[InvocationResult.success("a", "1", 0.2)], wall_clock=0.25
        )

        data = batch.to_dict()

        assert data["total_elapsed_seconds"] == 0.2
        assert data["wall_clock_seconds"] == 0.25


class TestPanelSummary:
    def test_to_dict(self) -> None:
        batch = BatchResult(
            results=[
                InvocationResult.success("a", "1", 0.2),
                InvocationResult.failure("b", "boom", 0.4),
            ]
        )
        summary = PanelSummary(results=batch, total_elapsed=0.4)

        data = summary.to_dict()

        assert data["experts"] == 2
        assert data["failed"] == 1
        assert data["total_elapsed_seconds"] == 0.4
        assert [r["responder"] for r in data["results"]] == ["a", "b"]
