"""Progress notifications emitted while experts are answering.

Observers are called from inside each concurrent unit, so several
notifications may be in flight at once and their relative order is not
defined. A failing observer never affects the result of the call it is
reporting on.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable

logger = logging.getLogger(__name__)


class ProgressObserver(ABC):
    """Receives start/success/failure notifications for each expert."""

    @abstractmethod
    def on_start(self, name: str) -> None:
        """Called immediately before the expert's request is issued.

        Args:
            name: Name of the expert
        """
        pass

    @abstractmethod
    def on_success(self, name: str, duration: float) -> None:
        """Called when the expert answered.

        Args:
            name: Name of the expert
            duration: Seconds the request took
        """
        pass

    @abstractmethod
    def on_failure(self, name: str, error: str) -> None:
        """Called when the expert's request failed or timed out.

        Args:
            name: Name of the expert
            error: Description of the failure
        """
        pass


class NoOpProgressObserver(ProgressObserver):
    """No-op implementation for when nobody is listening."""

    def on_start(self, name: str) -> None:
        pass

    def on_success(self, name: str, duration: float) -> None:
        pass

    def on_failure(self, name: str, error: str) -> None:
        pass


class LoggingProgressObserver(ProgressObserver):
    """Reports progress through the standard logging module."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._log = log or logger

    def on_start(self, name: str) -> None:
        self._log.info("%s is thinking...", name)

    def on_success(self, name: str, duration: float) -> None:
        self._log.info("%s responded in %.2fs", name, duration)

    def on_failure(self, name: str, error: str) -> None:
        self._log.warning("%s failed: %s", name, error)


class CompositeProgressObserver(ProgressObserver):
    """Forwards every notification to each wrapped observer."""

    def __init__(self, observers: Iterable[ProgressObserver]) -> None:
        self._observers = list(observers)

    def on_start(self, name: str) -> None:
        for observer in self._observers:
            notify_safely(observer.on_start, name)

    def on_success(self, name: str, duration: float) -> None:
        for observer in self._observers:
            notify_safely(observer.on_success, name, duration)

    def on_failure(self, name: str, error: str) -> None:
        for observer in self._observers:
            notify_safely(observer.on_failure, name, error)


def notify_safely(callback: Callable[..., None], *args: object) -> None:
    """Invoke an observer callback, logging and discarding any exception."""
    try:
        callback(*args)
    except Exception:
        logger.exception("Progress observer %r raised; ignoring", callback)
