"""Typed result models for panel execution.

``InvocationResult`` is produced once per expert per question, whether the
call succeeded or not. ``BatchResult`` keeps those results in the order the
experts were given, independent of completion order.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import Any

NO_RESPONSE_PLACEHOLDER = "No response received"


@dataclass(frozen=True)
class InvocationResult:
    """Outcome of asking one expert one question."""

    responder_name: str
    output_text: str
    succeeded: bool
    duration: float  # seconds
    error_message: str | None = None

    def __post_init__(self) -> None:
        if self.duration < 0:
            raise ValueError(f"duration must be non-negative, got {self.duration}")
        if self.succeeded and self.error_message is not None:
            raise ValueError("error_message must be None for a successful result")
        if not self.succeeded and not self.error_message:
            raise ValueError("error_message is required for a failed result")

    @classmethod
    def success(
        cls, responder_name: str, content: str | None, duration: float
    ) -> InvocationResult:
        """Build a successful result, substituting a placeholder for no content."""
        return cls(
            responder_name=responder_name,
            output_text=content if content else NO_RESPONSE_PLACEHOLDER,
            succeeded=True,
            duration=duration,
        )

    @classmethod
    def failure(
        cls, responder_name: str, error_message: str, duration: float
    ) -> InvocationResult:
        """Build a failed result with an error-annotated output text."""
        return cls(
            responder_name=responder_name,
            output_text=f"Error: {error_message}",
            succeeded=False,
            duration=duration,
            error_message=error_message,
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "responder": self.responder_name,
            "status": "success" if self.succeeded else "failed",
            "output": self.output_text,
            "duration_seconds": round(self.duration, 3),
        }
        if self.error_message is not None:
            result["error"] = self.error_message
        return result


@dataclass
class BatchResult(Sequence[InvocationResult]):
    """All results of one question, in expert input order.

    ``wall_clock`` is the time from batch start to the last join and is
    kept for diagnostics only; ``total_elapsed`` is the reported figure.
    """

    results: list[InvocationResult] = field(default_factory=list)
    wall_clock: float = 0.0

    def __len__(self) -> int:
        return len(self.results)

    def __iter__(self) -> Iterator[InvocationResult]:
        return iter(self.results)

    def __getitem__(self, index: Any) -> Any:
        return self.results[index]

    @property
    def total_elapsed(self) -> float:
        """Longest individual duration; experts run in parallel, not in turn."""
        return max((r.duration for r in self.results), default=0.0)

    @property
    def succeeded(self) -> list[InvocationResult]:
        return [r for r in self.results if r.succeeded]

    @property
    def failed(self) -> list[InvocationResult]:
        return [r for r in self.results if not r.succeeded]

    def to_dict(self) -> dict[str, Any]:
        return {
            "results": [r.to_dict() for r in self.results],
            "total_elapsed_seconds": round(self.total_elapsed, 3),
            "wall_clock_seconds": round(self.wall_clock, 3),
        }


@dataclass(frozen=True)
class PanelSummary:
    """Aggregated view handed to presentation."""

    results: BatchResult
    total_elapsed: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "results": [r.to_dict() for r in self.results],
            "total_elapsed_seconds": round(self.total_elapsed, 3),
            "experts": len(self.results),
            "failed": len(self.results.failed),
        }
