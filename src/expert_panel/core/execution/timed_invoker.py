"""Timed, failure-isolated invocation of a single expert."""

import logging
import time
from collections.abc import Callable

from expert_panel.core.config.experts import ExpertDescriptor
from expert_panel.core.execution.progress import (
    NoOpProgressObserver,
    ProgressObserver,
    notify_safely,
)
from expert_panel.core.execution.result_types import InvocationResult
from expert_panel.models.base import ModelInterface

logger = logging.getLogger(__name__)


def describe_error(error: BaseException) -> str:
    """Human-readable description of a failure, never empty."""
    message = str(error).strip()
    return message or type(error).__name__


class TimedInvoker:
    """Asks one expert one question and records how long it took.

    ``invoke`` never raises for a backend failure: every outcome is turned
    into an ``InvocationResult`` so one expert cannot take down its
    siblings. Cancellation is not a failure of the expert and propagates.
    """

    def __init__(
        self,
        model: ModelInterface,
        observer: ProgressObserver | None = None,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self._model = model
        self._observer = observer or NoOpProgressObserver()
        self._clock = clock

    @property
    def observer(self) -> ProgressObserver:
        return self._observer

    @property
    def clock(self) -> Callable[[], float]:
        return self._clock

    async def invoke(self, descriptor: ExpertDescriptor, query: str) -> InvocationResult:
        """Issue exactly one request for ``descriptor`` and time it."""
        name = descriptor.name
        notify_safely(self._observer.on_start, name)
        logger.debug("Invoking %s on %s", name, self._model.name)

        start_time = self._clock()
        try:
            content = await self._model.generate_response(
                message=query, role_prompt=descriptor.instructions
            )
        except Exception as e:
            duration = max(0.0, self._clock() - start_time)
            error_message = describe_error(e)
            logger.warning("%s failed after %.2fs: %s", name, duration, error_message)
            notify_safely(self._observer.on_failure, name, error_message)
            return InvocationResult.failure(name, error_message, duration)

        duration = max(0.0, self._clock() - start_time)
        logger.debug("%s responded in %.2fs", name, duration)
        notify_safely(self._observer.on_success, name, duration)
        return InvocationResult.success(name, content, duration)
