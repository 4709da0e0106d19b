"""Concurrent fan-out of one question to every expert in a panel."""

import asyncio
import logging
from collections.abc import Sequence

from expert_panel.core.config.experts import ExpertDescriptor
from expert_panel.core.execution.progress import notify_safely
from expert_panel.core.execution.result_types import BatchResult, InvocationResult
from expert_panel.core.execution.timed_invoker import TimedInvoker, describe_error

logger = logging.getLogger(__name__)


class PanelDispatcher:
    """Dispatches a question to all experts in parallel and joins the results.

    Every expert is launched and every expert is joined; results come back
    in the order the experts were given regardless of which finished first.
    ``max_concurrent`` of 0 or less means no limit. ``batch_timeout`` of
    ``None`` waits for the slowest expert; otherwise experts still running at
    the deadline are cancelled and reported as timed out.
    """

    def __init__(
        self,
        invoker: TimedInvoker,
        max_concurrent: int = 0,
        batch_timeout: float | None = None,
    ) -> None:
        if batch_timeout is not None and batch_timeout <= 0:
            raise ValueError(f"batch_timeout must be positive, got {batch_timeout}")
        self._invoker = invoker
        self._max_concurrent = max_concurrent
        self._batch_timeout = batch_timeout

    @property
    def max_concurrent(self) -> int:
        return self._max_concurrent

    @property
    def batch_timeout(self) -> float | None:
        return self._batch_timeout

    async def run_batch(
        self, query: str, descriptors: Sequence[ExpertDescriptor]
    ) -> BatchResult:
        """Ask every expert ``query`` concurrently and return ordered results."""
        if not descriptors:
            raise ValueError("A panel needs at least one expert")

        clock = self._invoker.clock
        semaphore = (
            asyncio.Semaphore(self._max_concurrent)
            if self._max_concurrent > 0
            else None
        )

        logger.debug(
            "Dispatching to %d experts (max_concurrent=%s, timeout=%s)",
            len(descriptors),
            self._max_concurrent or "unlimited",
            self._batch_timeout,
        )

        batch_start = clock()
        tasks = [
            asyncio.create_task(self._invoke_gated(descriptor, query, semaphore))
            for descriptor in descriptors
        ]

        try:
            _, pending = await asyncio.wait(tasks, timeout=self._batch_timeout)
        except asyncio.CancelledError:
            for task in tasks:
                task.cancel()
            raise

        if pending:
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)

        elapsed = max(0.0, clock() - batch_start)
        results = [
            self._collect(task, descriptor, elapsed)
            for task, descriptor in zip(tasks, descriptors, strict=True)
        ]

        return BatchResult(results=results, wall_clock=elapsed)

    def run_batch_sync(
        self, query: str, descriptors: Sequence[ExpertDescriptor]
    ) -> BatchResult:
        """Blocking wrapper around ``run_batch`` for synchronous callers."""
        return asyncio.run(self.run_batch(query, descriptors))

    async def _invoke_gated(
        self,
        descriptor: ExpertDescriptor,
        query: str,
        semaphore: asyncio.Semaphore | None,
    ) -> InvocationResult:
        if semaphore is None:
            return await self._invoker.invoke(descriptor, query)
        async with semaphore:
            return await self._invoker.invoke(descriptor, query)

    def _collect(
        self,
        task: "asyncio.Task[InvocationResult]",
        descriptor: ExpertDescriptor,
        elapsed: float,
    ) -> InvocationResult:
        """Turn a settled task into a result for its expert."""
        if task.cancelled():
            error_message = f"Timed out after {self._batch_timeout} seconds"
            logger.warning("%s: %s", descriptor.name, error_message)
            notify_safely(
                self._invoker.observer.on_failure, descriptor.name, error_message
            )
            return InvocationResult.failure(descriptor.name, error_message, elapsed)

        error = task.exception()
        if error is not None:
            # The invoker converts backend failures itself; this is a bug path
            logger.error(
                "Unexpected error invoking %s", descriptor.name, exc_info=error
            )
            error_message = describe_error(error)
            notify_safely(
                self._invoker.observer.on_failure, descriptor.name, error_message
            )
            return InvocationResult.failure(descriptor.name, error_message, elapsed)

        return task.result()
