"""Pre-build CSS files for components that use file caching."""
from __future__ import annotations

import logging
from typing import Callable

from style_capsule.component import StyledComponent
from style_capsule.registry import CacheStrategy, ClassRegistry, class_registry
from style_capsule.writer import CssFileWriter

logger = logging.getLogger("style_capsule.builder")

Output = Callable[[str], None]


class ComponentBuilder:
    """Writes one CSS file per file-cached component class."""

    def __init__(
        self, writer: CssFileWriter | None = None, classes: ClassRegistry | None = None
    ) -> None:
        self.writer = writer or CssFileWriter()
        self.classes = classes or class_registry

    def collect_components(self) -> list[type[StyledComponent]]:
        return [
            cls
            for cls in self.classes
            if isinstance(cls, type) and issubclass(cls, StyledComponent)
        ]

    def build_component(
        self, component_class: type[StyledComponent], output: Output | None = None
    ) -> str | None:
        """Write the scoped CSS of one component; None when it is skipped."""
        if component_class.cache_strategy is not CacheStrategy.FILE:
            return None
        if not component_class.has_class_styles():
            return None

        try:
            instance = component_class()
        except TypeError as exc:
            # Components whose constructor needs arguments cannot be built ahead of time.
            message = f"Skipped {component_class.__qualname__}: {exc}"
            logger.info(message)
            if output:
                output(message)
            return None

        css = component_class.class_styles()
        scoped = instance.scope_css(css)
        path = self.writer.write_css(scoped, component_class, instance.component_capsule)
        if path and output:
            output(f"Generated: {path}")
        return path

    def build_all(self, output: Output | None = None) -> int:
        """Build every registered component and return the number of files written."""
        self.writer.ensure_output_directory()
        generated = 0
        for component_class in self.collect_components():
            if self.build_component(component_class, output=output):
                generated += 1
        logger.info("Built %d capsule CSS file(s)", generated)
        if output:
            output("StyleCapsule CSS files built successfully")
        return generated
