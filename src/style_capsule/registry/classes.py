"""Registry of component classes that carry scoped styles."""

from __future__ import annotations

import threading
from typing import Iterator


class ClassRegistry:
    """Tracks named component classes, e.g. for building CSS files.

    Classes defined inside functions (``<locals>`` in their qualified name)
    are skipped: their names are not stable across processes.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._classes: dict[type, None] = {}

    def register(self, cls: type | None) -> None:
        if cls is None or not getattr(cls, "__qualname__", ""):
            return
        if "<locals>" in cls.__qualname__:
            return
        with self._lock:
            self._classes[cls] = None

    def unregister(self, cls: type) -> None:
        with self._lock:
            self._classes.pop(cls, None)

    def all(self) -> list[type]:
        with self._lock:
            return list(self._classes)

    def __iter__(self) -> Iterator[type]:
        return iter(self.all())

    def __contains__(self, cls: object) -> bool:
        with self._lock:
            return cls in self._classes

    def count(self) -> int:
        with self._lock:
            return len(self._classes)

    def clear(self) -> None:
        with self._lock:
            self._classes.clear()
