"""Tests for progress observers."""

import logging
from unittest.mock import Mock

import pytest

from expert_panel.core.execution.progress import (
    CompositeProgressObserver,
    LoggingProgressObserver,
    NoOpProgressObserver,
    ProgressObserver,
    notify_safely,
)


class TestNotifySafely:
    def test_forwards_arguments(self) -> None:
        callback = Mock()

        notify_safely(callback, "Physics Expert", 1.5)

        callback.assert_called_once_with("Physics Expert", 1.5)

    def test_swallows_and_logs_exceptions(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        callback = Mock(side_effect=RuntimeError("display broke"))

        with caplog.at_level(logging.ERROR):
            notify_safely(callback, "Physics Expert")

        assert "ignoring" in caplog.text
        assert "display broke" in caplog.text


class TestObservers:
    def test_observer_is_abstract(self) -> None:
        with pytest.raises(TypeError):
            ProgressObserver()  # type: ignore[abstract]

    def test_noop_observer_accepts_all_events(self) -> None:
        observer = NoOpProgressObserver()

        observer.on_start("a")
        observer.on_success("a", 0.1)
        observer.on_failure("a", "boom")

    def test_logging_observer(self, caplog: pytest.LogCaptureFixture) -> None:
        observer = LoggingProgressObserver()

        with caplog.at_level(logging.INFO):
            observer.on_start("Physics Expert")
            observer.on_success("Physics Expert", 1.234)
            observer.on_failure("Chemistry Expert", "boom")

        messages = [record.getMessage() for record in caplog.records]
        assert "Physics Expert is thinking..." in messages
        assert "Physics Expert responded in 1.23s" in messages
        assert "Chemistry Expert failed: boom" in messages

    def test_composite_isolates_failing_observer(self) -> None:
        broken = Mock(spec=ProgressObserver)
        broken.on_start.side_effect = RuntimeError("broken")
        healthy = Mock(spec=ProgressObserver)
        composite = CompositeProgressObserver([broken, healthy])

        composite.on_start("a")
        composite.on_success("a", 0.5)
        composite.on_failure("b", "boom")

        healthy.on_start.assert_called_once_with("a")
        healthy.on_success.assert_called_once_with("a", 0.5)
        healthy.on_failure.assert_called_once_with("b", "boom")
