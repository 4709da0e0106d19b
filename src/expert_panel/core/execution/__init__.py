"""Panel execution components."""

from expert_panel.core.execution.aggregator import summarize
from expert_panel.core.execution.panel_dispatcher import PanelDispatcher
from expert_panel.core.execution.panel_execution import PanelExecutor
from expert_panel.core.execution.progress import (
    CompositeProgressObserver,
    LoggingProgressObserver,
    NoOpProgressObserver,
    ProgressObserver,
)
from expert_panel.core.execution.result_types import (
    BatchResult,
    InvocationResult,
    PanelSummary,
)
from expert_panel.core.execution.timed_invoker import TimedInvoker

__all__ = [
    "BatchResult",
    "CompositeProgressObserver",
    "InvocationResult",
    "LoggingProgressObserver",
    "NoOpProgressObserver",
    "PanelDispatcher",
    "PanelExecutor",
    "PanelSummary",
    "ProgressObserver",
    "TimedInvoker",
    "summarize",
]
