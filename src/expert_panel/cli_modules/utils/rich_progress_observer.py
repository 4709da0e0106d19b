"""Rich console progress observer for live expert status lines."""

from rich.console import Console
from rich.markup import escape

from expert_panel.core.execution.progress import ProgressObserver


class RichProgressObserver(ProgressObserver):
    """Prints one status line per expert event to a Rich console."""

    def __init__(self, console: Console) -> None:
        """Initialize with the console to print to.

        Args:
            console: Rich console instance
        """
        self._console = console

    def on_start(self, name: str) -> None:
        self._console.print(f"[blue]🤖 {escape(name)} is thinking...[/blue]")

    def on_success(self, name: str, duration: float) -> None:
        self._console.print(
            f"[green]✅ {escape(name)} responded in {duration:.2f}s[/green]"
        )

    def on_failure(self, name: str, error: str) -> None:
        self._console.print(f"[red]❌ {escape(name)} failed: {escape(error)}[/red]")
