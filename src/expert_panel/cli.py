"""Command line interface for expert-panel."""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.logging import RichHandler

from expert_panel.cli_modules.utils.results_display import (
    display_json_results,
    display_results,
)
from expert_panel.cli_modules.utils.rich_progress_observer import (
    RichProgressObserver,
)
from expert_panel.core.config.config_manager import ConfigurationManager
from expert_panel.core.config.experts import DEFAULT_PANEL, PanelConfig, PanelLoader
from expert_panel.core.execution.panel_execution import PanelExecutor
from expert_panel.core.execution.result_types import PanelSummary
from expert_panel.exceptions import ExpertPanelError, PanelNotFoundError
from expert_panel.models.base import HTTPConnectionPool


def _configure_logging(verbose: bool) -> None:
    """Route library logging to stderr through Rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )
    # Keep HTTP client chatter out of debug output
    for noisy in ("httpx", "httpcore", "openai", "anthropic"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def _resolve_panel(
    panel: str | None,
    config_dir: str | None,
    config_manager: ConfigurationManager,
) -> PanelConfig:
    """Resolve ``--panel`` as a file path, then a panel name, then the default."""
    loader = PanelLoader()

    if panel is not None and Path(panel).is_file():
        return loader.load_from_file(panel)

    panel_dirs = [Path(config_dir)] if config_dir else config_manager.get_panels_dirs()

    if panel is None:
        return DEFAULT_PANEL

    for panel_dir in panel_dirs:
        found = loader.find_panel(str(panel_dir), panel)
        if found is not None:
            return found

    if panel == DEFAULT_PANEL.name:
        return DEFAULT_PANEL

    raise PanelNotFoundError(panel, [str(d) for d in panel_dirs])


def _resolve_question(question: str | None, panel: PanelConfig) -> str:
    """Question priority: argument > piped stdin > panel default."""
    if question is None and not sys.stdin.isatty():
        question = sys.stdin.read().strip() or None

    if question is None:
        question = panel.default_question

    if question is None or not question.strip():
        raise click.UsageError(
            "No question given. Pass it as an argument or pipe it on stdin."
        )
    return question.strip()


async def _run_panel(
    executor: PanelExecutor, panel: PanelConfig, question: str
) -> PanelSummary:
    try:
        return await executor.execute(panel, question)
    finally:
        await HTTPConnectionPool.close()


@click.group()
@click.version_option(package_name="expert-panel")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """Expert Panel - ask several AI experts the same question at once."""
    _configure_logging(verbose)


@cli.command()
@click.argument("question", required=False)
@click.option(
    "--panel",
    default=None,
    help="Panel name or path to a panel YAML file (default: science panel)",
)
@click.option(
    "--config-dir",
    default=None,
    help="Directory containing panel configurations",
)
@click.option("--provider", default=None, help="Backend provider (overrides config)")
@click.option("--model", default=None, help="Model or deployment name")
@click.option(
    "--max-concurrent",
    type=click.IntRange(min=0),
    default=None,
    help="Maximum number of experts running at once, 0 for no limit",
)
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Deadline in seconds for the whole panel",
)
@click.option(
    "--output-format",
    type=click.Choice(["json", "text"]),
    default="text",
    help="Output format for results",
)
@click.option("--mock", is_flag=True, help="Use the offline mock backend")
def ask(
    question: str | None,
    panel: str | None,
    config_dir: str | None,
    provider: str | None,
    model: str | None,
    max_concurrent: int | None,
    timeout: float | None,
    output_format: str,
    mock: bool,
) -> None:
    """Ask every expert in a panel QUESTION concurrently."""
    config_manager = ConfigurationManager()
    console = Console()

    try:
        panel_config = _resolve_panel(panel, config_dir, config_manager)
        final_question = _resolve_question(question, panel_config)

        overrides: dict[str, dict[str, Any]] = {}
        if max_concurrent is not None:
            overrides["concurrency"] = {"max_concurrent_experts": max_concurrent}
        if timeout is not None:
            overrides["execution"] = {"batch_timeout": timeout}

        observer = RichProgressObserver(console) if output_format == "text" else None
        executor = PanelExecutor.from_config(
            config_manager,
            provider="mock" if mock else provider,
            model_name=model,
            observer=observer,
            performance_overrides=overrides,
        )
    except ExpertPanelError as e:
        raise click.ClickException(str(e)) from e

    if output_format == "text":
        names = ", ".join(expert.name for expert in panel_config.experts)
        console.print(f"🚀 Panel '{panel_config.name}' with experts: {names}")
        console.print(f"🤔 Question: {final_question}", markup=False)
        console.print("⏳ Asking all experts concurrently...")
        console.print()

    summary = asyncio.run(_run_panel(executor, panel_config, final_question))

    if output_format == "json":
        display_json_results(summary, final_question)
    else:
        display_results(console, summary)


@cli.command("list-panels")
@click.option(
    "--config-dir",
    default=None,
    help="Directory containing panel configurations",
)
def list_panels(config_dir: str | None) -> None:
    """List available panels."""
    config_manager = ConfigurationManager()
    loader = PanelLoader()

    panel_dirs = [Path(config_dir)] if config_dir else config_manager.get_panels_dirs()

    click.echo("Built-in:")
    click.echo(f"  {DEFAULT_PANEL.name}: {DEFAULT_PANEL.description}")

    for panel_dir in panel_dirs:
        panels = loader.list_panels(str(panel_dir))
        if not panels:
            click.echo(f"\nNo panels found in {panel_dir}")
            continue

        click.echo(f"\n{panel_dir}:")
        for panel in sorted(panels, key=lambda p: p.name):
            display_name = (
                f"{panel.relative_path}/{panel.name}"
                if panel.relative_path
                else panel.name
            )
            click.echo(
                f"  {display_name}: {panel.description} "
                f"({len(panel.experts)} experts)"
            )


@cli.command()
def init() -> None:
    """Create a local .expert-panel configuration directory."""
    config_manager = ConfigurationManager()
    try:
        local_dir = config_manager.init_local_config()
    except ExpertPanelError as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"Initialized local configuration in {local_dir}")


if __name__ == "__main__":
    cli()
