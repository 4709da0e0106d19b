"""Summarize a joined batch for presentation."""

from expert_panel.core.execution.result_types import BatchResult, PanelSummary


def summarize(batch: BatchResult) -> PanelSummary:
    """Pair the ordered results with the batch's total elapsed time.

    Experts run in parallel, so the total is the longest single duration
    and never the sum of durations.
    """
    total_elapsed = max((result.duration for result in batch), default=0.0)
    return PanelSummary(results=batch, total_elapsed=total_elapsed)
