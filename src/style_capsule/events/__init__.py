"""Event system: bus and event types for CSS processing lifecycle."""

from style_capsule.events.bus import EventBus
from style_capsule.events.types import (
    CssFileFallback,
    CssFileWriteFailed,
    CssFileWritten,
    CssScoped,
    StylesheetRegistered,
)

__all__ = [
    "EventBus",
    "CssFileFallback",
    "CssFileWriteFailed",
    "CssFileWritten",
    "CssScoped",
    "StylesheetRegistered",
]
