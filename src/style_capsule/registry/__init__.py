"""Stylesheet and component class registries."""

from style_capsule.registry.classes import ClassRegistry
from style_capsule.registry.stylesheets import (
    DEFAULT_NAMESPACE,
    CacheStrategy,
    FileStylesheet,
    InlineStylesheet,
    StylesheetRegistry,
    normalize_namespace,
)

# Process-wide defaults used by components, helpers and the Flask extension.
stylesheet_registry = StylesheetRegistry()
class_registry = ClassRegistry()

__all__ = [
    "DEFAULT_NAMESPACE",
    "CacheStrategy",
    "ClassRegistry",
    "FileStylesheet",
    "InlineStylesheet",
    "StylesheetRegistry",
    "class_registry",
    "normalize_namespace",
    "stylesheet_registry",
]
