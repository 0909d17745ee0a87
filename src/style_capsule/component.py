"""Base class for components with encapsulated CSS.

Subclasses provide markup from ``view_template`` and CSS from either
``component_styles`` (per instance) or the ``class_styles`` classmethod::

    class Card(StyledComponent):
        def component_styles(self):
            return ".section { color: red; }"

        def view_template(self):
            return '<div class="section">Hello</div>'

``Card().render()`` produces::

    <style type="text/css">[data-capsule="a1b2c3d4"] .section { color: red; }</style>
    <div data-capsule="a1b2c3d4"><div class="section">Hello</div></div>

The capsule id is derived from the class, so every instance of a component
type shares it. Class attributes control the rest:

    capsule_id            fixed id instead of the derived one
    css_scoping_strategy  "selector_patching" (default, inherited) or "nesting"
    head_rendering        register CSS with the stylesheet registry instead
                          of emitting it next to the markup
    stylesheet_namespace  registry namespace for head rendering
    cache_strategy        "none", "time", "proc", "file" or a cache callable
    cache_ttl             seconds, for the time strategy
    cache_proc            callable for the proc strategy
    stylesheet_link_options  extra attributes for file-cached ``<link>`` tags

File caching needs ``class_styles``: instance styles may differ between
instances and cannot be written to one file.
"""

from __future__ import annotations

import hashlib
from typing import Any, ClassVar

from markupsafe import Markup

from style_capsule.css import ScopingStrategy, scope_css, validate_capsule_id
from style_capsule.registry import (
    CacheStrategy,
    StylesheetRegistry,
    class_registry,
    stylesheet_registry,
)
from style_capsule.registry.stylesheets import CacheProc


def _blank(css: str | None) -> bool:
    return css is None or not str(css).strip()


def generate_capsule_id(cls: type) -> str:
    """Derive a short, stable capsule id from a class's qualified name."""
    name = f"{cls.__module__}.{cls.__qualname__}"
    return ("a" + hashlib.sha1(name.encode("utf-8")).hexdigest())[:8]


class StyledComponent:
    capsule_id: ClassVar[str | None] = None
    css_scoping_strategy: ClassVar[ScopingStrategy | str] = ScopingStrategy.SELECTOR_PATCHING
    head_rendering: ClassVar[bool] = False
    stylesheet_namespace: ClassVar[str | None] = None
    cache_strategy: ClassVar[Any] = CacheStrategy.NONE
    cache_ttl: ClassVar[float | None] = None
    cache_proc: ClassVar[CacheProc | None] = None
    stylesheet_link_options: ClassVar[dict[str, Any] | None] = None
    registry: ClassVar[StylesheetRegistry] = stylesheet_registry

    _css_cache: ClassVar[dict[tuple[str, str, str], str]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls._css_cache = {}

        own = cls.__dict__
        if "css_scoping_strategy" in own:
            cls.css_scoping_strategy = ScopingStrategy.coerce(own["css_scoping_strategy"])
        if own.get("capsule_id") is not None:
            validate_capsule_id(own["capsule_id"])
        if "cache_strategy" in own:
            strategy = own["cache_strategy"]
            if callable(strategy) and not isinstance(strategy, str):
                cls.cache_proc = staticmethod(strategy)
                cls.cache_strategy = CacheStrategy.PROC
            else:
                cls.cache_strategy = CacheStrategy.coerce(strategy)
        proc = own.get("cache_proc")
        if proc is not None and not isinstance(proc, staticmethod):
            cls.cache_proc = staticmethod(proc)

        class_registry.register(cls)

    # --- styles ---------------------------------------------------------------

    def component_styles(self) -> str | None:
        """Per-instance CSS. Override to style a component dynamically."""
        return None

    @classmethod
    def class_styles(cls) -> str | None:
        """Per-class CSS. Override to allow file caching."""
        return None

    def has_instance_styles(self) -> bool:
        return not _blank(self.component_styles())

    @classmethod
    def has_class_styles(cls) -> bool:
        return not _blank(cls.class_styles())

    def has_styles(self) -> bool:
        return self.has_instance_styles() or self.has_class_styles()

    def styles_content(self) -> str | None:
        """Instance styles when present, otherwise class styles."""
        if self.has_instance_styles():
            return self.component_styles()
        if self.has_class_styles():
            return type(self).class_styles()
        return None

    def class_styles_only(self) -> bool:
        return self.has_class_styles() and not self.has_instance_styles()

    def file_caching_allowed(self) -> bool:
        return type(self).cache_strategy is CacheStrategy.FILE and self.class_styles_only()

    # --- scoping --------------------------------------------------------------

    @property
    def component_capsule(self) -> str:
        cls = type(self)
        return cls.capsule_id or generate_capsule_id(cls)

    def scope_css(self, css: str) -> str:
        """Scope *css*, caching one result per class, capsule and strategy."""
        cls = type(self)
        capsule = self.component_capsule
        strategy = ScopingStrategy.coerce(cls.css_scoping_strategy)
        key = (cls.__qualname__, capsule, str(strategy))
        cached = cls._css_cache.get(key)
        if cached is not None:
            return cached
        scoped = scope_css(css, capsule, strategy, component=cls)
        cls._css_cache[key] = scoped
        return scoped

    @classmethod
    def clear_css_cache(cls) -> None:
        cls._css_cache = {}

    # --- rendering ------------------------------------------------------------

    def view_template(self) -> str:
        """Return the component's inner HTML."""
        return ""

    def render_capsule_styles(self) -> Markup:
        """Emit a ``<style>`` tag, or register the CSS for head rendering."""
        css = self.styles_content()
        if _blank(css):
            return Markup("")
        scoped = self.scope_css(css)
        cls = type(self)

        if not cls.head_rendering:
            return Markup('<style type="text/css">') + Markup(scoped) + Markup("</style>")

        strategy = cls.cache_strategy
        ttl, proc = cls.cache_ttl, cls.cache_proc
        if strategy is CacheStrategy.FILE and not self.file_caching_allowed():
            strategy, ttl, proc = CacheStrategy.NONE, None, None
        cache_key = None
        if strategy is not CacheStrategy.NONE:
            cache_key = f"{cls.__module__}.{cls.__qualname__}:{self.component_capsule}"

        cls.registry.register_inline(
            scoped,
            namespace=cls.stylesheet_namespace,
            capsule_id=self.component_capsule,
            cache_key=cache_key,
            cache_strategy=strategy,
            cache_ttl=ttl,
            cache_proc=proc,
            component=cls,
            link_options=cls.stylesheet_link_options,
        )
        return Markup("")

    def render(self) -> Markup:
        content = Markup(self.view_template())
        if not self.has_styles():
            return content
        styles = self.render_capsule_styles()
        wrapper = Markup('<div data-capsule="{}">').format(self.component_capsule)
        return styles + wrapper + content + Markup("</div>")

    def __html__(self) -> Markup:
        return self.render()
