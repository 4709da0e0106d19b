"""Panel execution: wires backend, invoker, dispatcher and aggregator."""

import logging
from collections.abc import Sequence
from typing import Any

from expert_panel.core.config.config_manager import ConfigurationManager
from expert_panel.core.config.experts import ExpertDescriptor, PanelConfig
from expert_panel.core.execution.aggregator import summarize
from expert_panel.core.execution.panel_dispatcher import PanelDispatcher
from expert_panel.core.execution.progress import ProgressObserver
from expert_panel.core.execution.result_types import PanelSummary
from expert_panel.core.execution.timed_invoker import TimedInvoker
from expert_panel.core.models.model_factory import ModelFactory
from expert_panel.exceptions import ConfigurationError
from expert_panel.models.base import ModelInterface

logger = logging.getLogger(__name__)


def get_effective_concurrency_limit(performance_config: dict[str, Any]) -> int:
    """Configured expert concurrency limit; 0 means unlimited.

    Raises:
        ConfigurationError: If the limit is not an integer
    """
    configured = performance_config.get("concurrency", {}).get(
        "max_concurrent_experts", 0
    )
    if configured is None:
        return 0
    if isinstance(configured, bool) or not isinstance(configured, int):
        raise ConfigurationError(
            f"max_concurrent_experts must be an integer, got {configured!r}"
        )
    return max(configured, 0)


def get_batch_timeout(performance_config: dict[str, Any]) -> float | None:
    """Configured whole-batch deadline in seconds, or None to wait forever.

    Raises:
        ConfigurationError: If the deadline is not a positive number
    """
    timeout = performance_config.get("execution", {}).get("batch_timeout")
    if timeout is None:
        return None
    if (
        isinstance(timeout, bool)
        or not isinstance(timeout, int | float)
        or timeout <= 0
    ):
        raise ConfigurationError(
            f"batch_timeout must be a positive number of seconds, got {timeout!r}"
        )
    return float(timeout)


class PanelExecutor:
    """Asks a panel of experts one question and summarizes the answers."""

    def __init__(
        self,
        model: ModelInterface,
        performance_config: dict[str, Any] | None = None,
        observer: ProgressObserver | None = None,
    ) -> None:
        self._model = model
        self._performance_config = performance_config or {}
        self._invoker = TimedInvoker(model, observer)
        self._dispatcher = PanelDispatcher(
            self._invoker,
            max_concurrent=get_effective_concurrency_limit(self._performance_config),
            batch_timeout=get_batch_timeout(self._performance_config),
        )

    @classmethod
    def from_config(
        cls,
        config_manager: ConfigurationManager,
        *,
        provider: str | None = None,
        model_name: str | None = None,
        observer: ProgressObserver | None = None,
        performance_overrides: dict[str, Any] | None = None,
    ) -> "PanelExecutor":
        """Build an executor whose backend comes from configuration.

        Raises:
            ConfigurationError: If the performance settings are invalid or
                the backend cannot be constructed
        """
        performance_config = dict(config_manager.load_performance_config())
        for section, values in (performance_overrides or {}).items():
            merged = dict(performance_config.get(section, {}))
            merged.update(values)
            performance_config[section] = merged

        # Reject bad settings before any backend client is opened
        get_effective_concurrency_limit(performance_config)
        get_batch_timeout(performance_config)

        model = ModelFactory(config_manager).load_model(provider, model_name)
        return cls(model, performance_config, observer)

    @property
    def model(self) -> ModelInterface:
        return self._model

    @property
    def dispatcher(self) -> PanelDispatcher:
        return self._dispatcher

    async def execute(
        self,
        panel: PanelConfig | Sequence[ExpertDescriptor],
        question: str,
    ) -> PanelSummary:
        """Run every expert on ``question`` and return the summary."""
        experts = panel.experts if isinstance(panel, PanelConfig) else list(panel)
        logger.info("Asking %d experts: %s", len(experts), question)

        batch = await self._dispatcher.run_batch(question, experts)
        summary = summarize(batch)

        logger.info(
            "Panel finished: %d succeeded, %d failed, total %.2fs",
            len(batch.succeeded),
            len(batch.failed),
            summary.total_elapsed,
        )
        return summary
