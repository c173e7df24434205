"""
Listeners notified when a lifecycle job reaches a terminal status.

The scheduler calls ``RefreshNotifier.notify_changed()`` first and
``EventTracker.track()`` second, once per job.
"""

import threading
from collections.abc import Callable
from typing import Protocol, runtime_checkable

from codecommit_lifecycle.logging import get_logger
from codecommit_lifecycle.types.jobs import JobState, OperationKind

_analytics_logger = get_logger("analytics")


@runtime_checkable
class RefreshNotifier(Protocol):
    """Tells a presentation layer to re-fetch the repository list."""

    def notify_changed(self) -> None: ...


@runtime_checkable
class EventTracker(Protocol):
    """Fire-and-forget telemetry for lifecycle operations."""

    def track(self, operation: OperationKind, outcome: JobState) -> None: ...


class NullRefreshNotifier:
    def notify_changed(self) -> None:
        pass


class RefreshRegistry:
    """
    Fan-out RefreshNotifier for every registered content view.

    Example:
        ```python
        registry = RefreshRegistry()
        registry.register(tree_view.reload)
        scheduler = JobScheduler(refresh_notifier=registry)
        ```
    """

    def __init__(self) -> None:
        self._listeners: list[Callable[[], None]] = []
        self._lock = threading.Lock()

    def register(self, listener: Callable[[], None]) -> None:
        with self._lock:
            self._listeners.append(listener)

    def unregister(self, listener: Callable[[], None]) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def notify_changed(self) -> None:
        """
        Call every listener.

        Errors propagate to the scheduler, which logs and swallows them.
        """
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            listener()


class LoggingEventTracker:
    """EventTracker that writes one INFO line per event to the analytics logger."""

    def track(self, operation: OperationKind, outcome: JobState) -> None:
        _analytics_logger.info("%s repository: %s", operation.value, outcome.value)
