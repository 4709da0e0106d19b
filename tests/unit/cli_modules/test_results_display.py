"""Tests for CLI result rendering."""

import json
from io import StringIO

import pytest
from rich.console import Console

from expert_panel.cli_modules.utils.results_display import (
    display_json_results,
    display_results,
)
from expert_panel.cli_modules.utils.rich_progress_observer import (
    RichProgressObserver,
)
from expert_panel.core.execution.result_types import (
    BatchResult,
    InvocationResult,
    PanelSummary,
)


def _console() -> tuple[Console, StringIO]:
    buffer = StringIO()
    return Console(file=buffer, width=100, color_system=None), buffer


def _summary(*results: InvocationResult) -> PanelSummary:
    batch = BatchResult(results=list(results))
    return PanelSummary(results=batch, total_elapsed=batch.total_elapsed)


class TestDisplayResults:
    def test_renders_each_expert_and_total(self) -> None:
        console, buffer = _console()
        summary = _summary(
            InvocationResult.success("Physics Expert", "Kinetic energy.", 1.2),
            InvocationResult.success("Chemistry Expert", "Reaction rates.", 1.4),
        )

        display_results(console, summary)

        output = buffer.getvalue()
        assert "CONCURRENT EXPERT RESPONSES" in output
        assert output.index("Physics Expert:") < output.index("Chemistry Expert:")
        assert "Kinetic energy." in output
        assert "Response time: 1.20 seconds" in output
        assert "All experts responded! Total time: 1.40 seconds" in output

    def test_reports_failures(self) -> None:
        console, buffer = _console()
        summary = _summary(
            InvocationResult.success("Physics Expert", "ok", 0.2),
            InvocationResult.failure("Chemistry Expert", "rate limited", 0.3),
        )

        display_results(console, summary)

        output = buffer.getvalue()
        assert "Error: rate limited" in output
        assert "1 of 2 experts failed" in output

    def test_output_is_not_treated_as_markup(self) -> None:
        console, buffer = _console()
        summary = _summary(
            InvocationResult.success("Physics Expert", "Use [bold]E=mc^2[/bold]", 0.1)
        )

        display_results(console, summary)

        assert "[bold]E=mc^2[/bold]" in buffer.getvalue()


def test_display_json_results(capsys: pytest.CaptureFixture[str]) -> None:
    summary = _summary(InvocationResult.success("Physics Expert", "Energy.", 0.5))

    display_json_results(summary, "What is temperature?")

    payload = json.loads(capsys.readouterr().out)
    assert payload["question"] == "What is temperature?"
    assert payload["experts"] == 1
    assert payload["results"][0]["output"] == "Energy."


class TestRichProgressObserver:
    def test_prints_status_lines(self) -> None:
        console, buffer = _console()
        observer = RichProgressObserver(console)

        observer.on_start("Physics Expert")
        observer.on_success("Physics Expert", 1.234)
        observer.on_failure("Chemistry Expert", "bad [request]")

        output = buffer.getvalue()
        assert "Physics Expert is thinking..." in output
        assert "Physics Expert responded in 1.23s" in output
        assert "Chemistry Expert failed: bad [request]" in output
