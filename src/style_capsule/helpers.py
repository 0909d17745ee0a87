"""Template helpers that work without any web framework.

``style_capsule`` scopes a block of markup that carries its own ``<style>``::

    style_capsule('<style>.section { color: red; }</style><div class="section">Hi</div>')

returns the scoped ``<style>`` tag followed by the markup wrapped in a
``<div data-capsule="...">``.
"""

from __future__ import annotations

import hashlib
import inspect
import re
import threading
from typing import Any

from markupsafe import Markup, escape

from style_capsule.css import scope_selectors
from style_capsule.errors import SizeExceededError
from style_capsule.registry import StylesheetRegistry, stylesheet_registry
from style_capsule.registry.stylesheets import DEFAULT_ASSETS_URL

MAX_HTML_SIZE = 10_000_000

_STYLE_RE = re.compile(r"<style[^>]*>(.*?)</style>", re.DOTALL)

_scoped_cache = threading.local()


def generate_capsule_id(css: str, location: str | None = None) -> str:
    """Derive a capsule id from the calling location and the CSS itself."""
    if location is None:
        frame = inspect.currentframe().f_back
        location = f"{frame.f_code.co_filename}:{frame.f_lineno}"
    digest = hashlib.sha1(f"{location}:{css}".encode("utf-8")).hexdigest()
    return ("a" + digest)[:8]


def scope_css(css: str, capsule_id: str) -> str:
    """Scope *css*, reusing the result for *capsule_id* within this thread."""
    cache: dict[str, str] = getattr(_scoped_cache, "entries", None) or {}
    _scoped_cache.entries = cache
    if capsule_id not in cache:
        cache[capsule_id] = scope_selectors(css, capsule_id)
    return cache[capsule_id]


def clear_scope_cache() -> None:
    _scoped_cache.entries = {}


def content_tag(tag: str, content: str | Markup = "", **attrs: Any) -> Markup:
    """Build an HTML element. Dict values expand to prefixed attributes.

    ``content_tag("div", "x", data={"capsule": "abc"})`` renders
    ``<div data-capsule="abc">x</div>``. Plain strings are escaped.
    """
    rendered = []
    for key, value in attrs.items():
        if isinstance(value, dict):
            for sub_key, sub_value in value.items():
                rendered.append(f' {escape(key)}-{escape(sub_key)}="{escape(sub_value)}"')
        else:
            rendered.append(f' {escape(key)}="{escape(value)}"')
    return Markup(f"<{tag}{''.join(rendered)}>{escape(content)}</{tag}>")


def style_capsule(
    content: str | None = None,
    css: str | None = None,
    capsule_id: str | None = None,
) -> Markup:
    """Scope CSS and wrap *content* in a capsule.

    Without *css* the first ``<style>`` element of *content* provides it.
    With *css* and no *content* only the scoped ``<style>`` tag is returned.
    """
    caller = inspect.currentframe().f_back
    location = f"{caller.f_code.co_filename}:{caller.f_lineno}"

    if css is None and content is not None:
        size = len(content.encode("utf-8"))
        if size > MAX_HTML_SIZE:
            raise SizeExceededError(size, MAX_HTML_SIZE, subject="HTML content")
        match = _STYLE_RE.search(content)
        if match:
            css = match.group(1)
            content = _STYLE_RE.sub("", content, count=1).strip()
    elif css is not None and content is None:
        capsule_id = capsule_id or generate_capsule_id(css, location)
        return content_tag("style", Markup(scope_css(css, capsule_id)), type="text/css")
    elif content is None:
        return Markup("")

    if css is None or not css.strip():
        return Markup(content)

    capsule_id = capsule_id or generate_capsule_id(css, location)
    style_tag = content_tag("style", Markup(scope_css(css, capsule_id)), type="text/css")
    wrapped = content_tag("div", Markup(content), data={"capsule": capsule_id})
    return style_tag + wrapped


def register_stylesheet(
    file_path: str,
    namespace: object = None,
    registry: StylesheetRegistry | None = None,
    **options: Any,
) -> None:
    """Register a stylesheet file for head rendering."""
    (registry or stylesheet_registry).register(file_path, namespace=namespace, **options)


def stylesheet_registry_tags(
    namespace: object = None,
    registry: StylesheetRegistry | None = None,
    assets_url: str = DEFAULT_ASSETS_URL,
) -> Markup:
    """Render the registered stylesheets for the document head."""
    return (registry or stylesheet_registry).render_head_stylesheets(
        namespace=namespace, assets_url=assets_url
    )
