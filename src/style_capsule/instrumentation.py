"""Timing and size instrumentation published on a process-wide event bus.

Subscribe to the module-level ``bus`` to observe CSS processing::

    from style_capsule.events import CssScoped
    from style_capsule.instrumentation import bus

    bus.subscribe(CssScoped, lambda e: print(e.capsule_id, e.duration))

Metrics are only computed when a listener for the event type exists.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable

from style_capsule.events import CssScoped, EventBus

logger = logging.getLogger("style_capsule")

bus = EventBus()


def component_name(component: object) -> str:
    """Return a display name for a component class, instance or label."""
    if component is None:
        return "Unknown"
    if isinstance(component, str):
        return component
    if isinstance(component, type):
        return f"{component.__module__}.{component.__qualname__}"
    return component_name(type(component))


def notify(event: Any) -> None:
    """Emit *event* if anyone listens for its type."""
    if bus.has_listeners(type(event)):
        bus.emit(event)


def instrument_css_processing(
    *,
    strategy: str,
    component: object,
    capsule_id: str,
    css: str,
    operation: Callable[[], str],
) -> str:
    """Run a scoping *operation* and publish a CssScoped event for it."""
    if not bus.has_listeners(CssScoped):
        result = operation()
        logger.debug("Scoped CSS capsule=%s strategy=%s", capsule_id, strategy)
        return result

    start = time.monotonic()
    result = operation()
    elapsed = time.monotonic() - start
    logger.debug(
        "Scoped CSS capsule=%s strategy=%s latency=%.4fs", capsule_id, strategy, elapsed
    )
    bus.emit(
        CssScoped(
            strategy=str(strategy),
            component=component_name(component),
            capsule_id=capsule_id,
            input_size=len(css.encode("utf-8")),
            output_size=len(result.encode("utf-8")),
            duration=elapsed,
        )
    )
    return result
