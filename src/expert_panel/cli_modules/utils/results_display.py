"""Results display utilities for the CLI."""

import json

import click
from rich.console import Console
from rich.markup import escape
from rich.rule import Rule

from expert_panel.core.execution.result_types import PanelSummary


def display_results(console: Console, summary: PanelSummary) -> None:
    """Render every expert's answer followed by the total time."""
    console.print()
    console.print("[bold blue]📋 CONCURRENT EXPERT RESPONSES:[/bold blue]")
    console.print(Rule(style="blue"))

    for result in summary.results:
        style = "bold green" if result.succeeded else "bold red"
        console.print()
        console.print(f"[{style}]🔬 {escape(result.responder_name)}:[/{style}]")
        console.print(Rule(style="dim"))
        # Expert output is printed verbatim, without markup interpretation
        console.print(result.output_text, markup=False, highlight=False)
        console.print(f"[dim]⏱️  Response time: {result.duration:.2f} seconds[/dim]")

    console.print()
    failed = len(summary.results.failed)
    if failed:
        console.print(
            f"[yellow]⚠️  {failed} of {len(summary.results)} experts failed. "
            f"Total time: {summary.total_elapsed:.2f} seconds[/yellow]"
        )
    else:
        console.print(
            f"[green]✅ All experts responded! "
            f"Total time: {summary.total_elapsed:.2f} seconds[/green]"
        )
    if len(summary.results) > 1:
        console.print("[dim]   (Concurrent execution - experts ran in parallel)[/dim]")


def display_json_results(summary: PanelSummary, question: str) -> None:
    """Write the summary as a JSON document to stdout."""
    payload = {"question": question, **summary.to_dict()}
    click.echo(json.dumps(payload, indent=2, ensure_ascii=False))
