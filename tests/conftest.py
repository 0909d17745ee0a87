from __future__ import annotations

import pytest

from style_capsule import helpers, instrumentation
from style_capsule.registry import class_registry, stylesheet_registry


@pytest.fixture(autouse=True)
def reset_global_state():
    """Isolate the process-wide registries, caches and event bus per test."""
    yield
    instrumentation.bus.clear()
    stylesheet_registry.clear()
    stylesheet_registry.clear_manifest()
    stylesheet_registry.clear_inline_cache()
    helpers.clear_scope_cache()
    class_registry.clear()
