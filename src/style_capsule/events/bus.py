"""Simple synchronous event bus for instrumentation events."""

import threading
from typing import Any, Callable


class EventBus:
    """Synchronous publish-subscribe event bus.

    Listeners can subscribe to specific event types or receive all events.
    Events are dispatched synchronously in registration order on the
    emitting thread.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._listeners: dict[type, list[Callable]] = {}
        self._global_listeners: list[Callable] = []

    def subscribe(self, event_type: type, callback: Callable) -> None:
        """Register a callback for a specific event type."""
        with self._lock:
            self._listeners.setdefault(event_type, []).append(callback)

    def on_all(self, callback: Callable) -> None:
        """Register a callback that receives every event."""
        with self._lock:
            self._global_listeners.append(callback)

    def unsubscribe(self, callback: Callable, event_type: type | None = None) -> None:
        """Remove *callback* from one event type, or from everything."""
        with self._lock:
            types = [event_type] if event_type is not None else list(self._listeners)
            for t in types:
                callbacks = self._listeners.get(t, [])
                if callback in callbacks:
                    callbacks.remove(callback)
            if event_type is None and callback in self._global_listeners:
                self._global_listeners.remove(callback)

    def has_listeners(self, event_type: type) -> bool:
        """True when emitting *event_type* would reach at least one callback."""
        with self._lock:
            return bool(self._global_listeners or self._listeners.get(event_type))

    def clear(self) -> None:
        with self._lock:
            self._listeners.clear()
            self._global_listeners.clear()

    def emit(self, event: Any) -> None:
        """Dispatch an event to all matching listeners."""
        with self._lock:
            callbacks = list(self._global_listeners)
            callbacks.extend(self._listeners.get(type(event), []))
        for cb in callbacks:
            cb(event)
