"""Registry of stylesheets to be emitted into the document ``<head>``.

File references live in a process-wide manifest: they are static, so they
are collected once and survive across requests. Inline CSS is
request-scoped and held in a context variable, so concurrent requests on
different threads or tasks never see each other's styles. Inline CSS can
additionally be cached process-wide with a TTL or a custom policy.
"""

from __future__ import annotations

import logging
import threading
import time
from contextvars import ContextVar
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from itertools import count
from typing import Any, Callable

from markupsafe import Markup, escape

from style_capsule.config import StyleCapsuleConfig
from style_capsule.errors import ConfigurationError
from style_capsule.events import StylesheetRegistered
from style_capsule.instrumentation import notify
from style_capsule.writer import CssFileWriter

logger = logging.getLogger("style_capsule.registry")

DEFAULT_NAMESPACE = "default"

# (css, capsule_id, namespace) -> (cache_key, should_cache, expires_at)
CacheProc = Callable[[str, str | None, str], tuple]
LinkRenderer = Callable[[str, dict[str, Any]], str]

DEFAULT_ASSETS_URL = "/assets"

_registry_ids = count()


class CacheStrategy(StrEnum):
    NONE = "none"
    TIME = "time"
    PROC = "proc"
    FILE = "file"

    @classmethod
    def coerce(cls, value: CacheStrategy | str | None) -> CacheStrategy:
        if value is None:
            return cls.NONE
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise ConfigurationError(
                f"cache_strategy must be a str, CacheStrategy or callable "
                f"(got: {type(value).__name__})"
            )
        try:
            return cls(value)
        except ValueError:
            raise ConfigurationError(
                f"cache_strategy must be none, time, proc, or file (got: {value!r})"
            ) from None


@dataclass(frozen=True)
class FileStylesheet:
    file_path: str
    options: tuple[tuple[str, Any], ...] = ()

    @property
    def attrs(self) -> dict[str, Any]:
        return dict(self.options)


@dataclass(frozen=True)
class InlineStylesheet:
    css: str
    capsule_id: str | None = None


@dataclass(frozen=True)
class _CacheEntry:
    css: str
    cached_at: float
    expires_at: float | None


def normalize_namespace(namespace: object) -> str:
    """Map None or blank namespaces to DEFAULT_NAMESPACE."""
    if namespace is None or not str(namespace).strip():
        return DEFAULT_NAMESPACE
    return str(namespace)


def _timestamp(value: float | datetime | None) -> float | None:
    if isinstance(value, datetime):
        return value.timestamp()
    return value


class StylesheetRegistry:
    """Hybrid process-wide / request-scoped stylesheet registry."""

    def __init__(
        self,
        config: StyleCapsuleConfig | None = None,
        writer: CssFileWriter | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.config = config or StyleCapsuleConfig()
        self.writer = writer or CssFileWriter(self.config)
        self._clock = clock
        self._lock = threading.Lock()
        self._manifest: dict[str, dict[FileStylesheet, None]] = {}
        self._inline_cache: dict[str, _CacheEntry] = {}
        self._last_cleanup: float | None = None
        self._inline: ContextVar[dict[str, list[InlineStylesheet]] | None] = ContextVar(
            f"style_capsule_inline_{next(_registry_ids)}", default=None
        )

    # --- registration ---------------------------------------------------------

    def register(self, file_path: str, namespace: object = None, **options: Any) -> None:
        """Add a stylesheet file reference; repeated registrations are ignored."""
        ns = normalize_namespace(namespace)
        entry = FileStylesheet(file_path=file_path, options=tuple(sorted(options.items())))
        with self._lock:
            self._manifest.setdefault(ns, {})[entry] = None
        notify(StylesheetRegistered(namespace=ns, cache_strategy="none", file_path=file_path))

    def register_inline(
        self,
        css: str,
        namespace: object = None,
        capsule_id: str | None = None,
        cache_key: str | None = None,
        cache_strategy: CacheStrategy | str | None = CacheStrategy.NONE,
        cache_ttl: float | None = None,
        cache_proc: CacheProc | None = None,
        component: object = None,
        link_options: dict[str, Any] | None = None,
    ) -> None:
        """Register already scoped CSS for the current request.

        With the FILE strategy the CSS is written once (or an existing file is
        reused) and registered as a file reference instead.
        """
        strategy = CacheStrategy.coerce(cache_strategy)
        ns = normalize_namespace(namespace)

        if strategy is CacheStrategy.FILE and component is not None and capsule_id:
            path = self.writer.file_path_for(component, capsule_id)
            if path is None:
                path = self.writer.write_css(css, component, capsule_id)
            if path is not None:
                self.register(path, namespace=ns, **(link_options or {}))
                return

        caching = strategy in (CacheStrategy.TIME, CacheStrategy.PROC) and cache_key
        cached = None
        if caching:
            cached = self.cached_inline(
                cache_key,
                cache_strategy=strategy,
                cache_ttl=cache_ttl,
                cache_proc=cache_proc,
                css=css,
                capsule_id=capsule_id,
                namespace=ns,
            )

        current = dict(self._inline.get() or {})
        current[ns] = [*current.get(ns, []), InlineStylesheet(cached or css, capsule_id)]
        self._inline.set(current)

        if caching and cached is None:
            self.cache_inline_css(
                cache_key,
                css,
                cache_strategy=strategy,
                cache_ttl=cache_ttl,
                cache_proc=cache_proc,
                capsule_id=capsule_id,
                namespace=ns,
            )
        notify(
            StylesheetRegistered(
                namespace=ns,
                cache_strategy=str(strategy),
                inline_size=len((cached or css).encode("utf-8")),
            )
        )

    # --- inline cache ---------------------------------------------------------

    def cached_inline(
        self,
        cache_key: str,
        *,
        cache_strategy: CacheStrategy | str,
        cache_ttl: float | None = None,
        cache_proc: CacheProc | None = None,
        css: str | None = None,
        capsule_id: str | None = None,
        namespace: object = None,
    ) -> str | None:
        """Return cached CSS for *cache_key* unless it is missing or stale."""
        self._cleanup_if_needed()
        strategy = CacheStrategy.coerce(cache_strategy)
        with self._lock:
            entry = self._inline_cache.get(cache_key)
        if entry is None:
            return None

        if strategy is CacheStrategy.TIME:
            if cache_ttl and entry.expires_at is not None and self._clock() > entry.expires_at:
                return None
        elif strategy is CacheStrategy.PROC:
            if cache_proc is None:
                return None
            _key, should_use, _expires = cache_proc(
                css or "", capsule_id, normalize_namespace(namespace)
            )
            if not should_use:
                return None
        return entry.css

    def cache_inline_css(
        self,
        cache_key: str,
        css: str,
        *,
        cache_strategy: CacheStrategy | str,
        cache_ttl: float | None = None,
        cache_proc: CacheProc | None = None,
        capsule_id: str | None = None,
        namespace: object = None,
    ) -> None:
        strategy = CacheStrategy.coerce(cache_strategy)
        now = self._clock()
        expires_at = None
        if strategy is CacheStrategy.TIME and cache_ttl:
            expires_at = now + cache_ttl
        elif strategy is CacheStrategy.PROC and cache_proc is not None:
            _key, _should_cache, proc_expires = cache_proc(
                css, capsule_id, normalize_namespace(namespace)
            )
            expires_at = _timestamp(proc_expires)
        with self._lock:
            self._inline_cache[cache_key] = _CacheEntry(css, now, expires_at)

    def clear_inline_cache(self, cache_key: str | None = None) -> None:
        with self._lock:
            if cache_key is None:
                self._inline_cache.clear()
            else:
                self._inline_cache.pop(cache_key, None)

    def cleanup_expired_cache(self) -> int:
        """Drop expired inline cache entries and return how many were removed."""
        now = self._clock()
        with self._lock:
            expired = [
                key
                for key, entry in self._inline_cache.items()
                if entry.expires_at is not None and now > entry.expires_at
            ]
            for key in expired:
                del self._inline_cache[key]
            self._last_cleanup = now
        if expired:
            logger.debug("Removed %d expired inline CSS entries", len(expired))
        return len(expired)

    def _cleanup_if_needed(self) -> None:
        last = self._last_cleanup
        if last is None or self._clock() - last > self.config.cleanup_interval:
            self.cleanup_expired_cache()

    # --- queries --------------------------------------------------------------

    def manifest_files(self) -> dict[str, list[FileStylesheet]]:
        with self._lock:
            return {ns: list(entries) for ns, entries in self._manifest.items()}

    def request_inline_stylesheets(self) -> dict[str, list[InlineStylesheet]]:
        return {ns: list(items) for ns, items in (self._inline.get() or {}).items()}

    def stylesheets_for(
        self, namespace: object = None
    ) -> list[FileStylesheet | InlineStylesheet]:
        """Files then inline CSS registered under one namespace."""
        ns = normalize_namespace(namespace)
        result: list[FileStylesheet | InlineStylesheet] = []
        result.extend(self.manifest_files().get(ns, []))
        result.extend(self.request_inline_stylesheets().get(ns, []))
        return result

    def any(self, namespace: object = None) -> bool:
        if namespace is None:
            files = self.manifest_files().values()
            inline = self.request_inline_stylesheets().values()
            return any(files) or any(inline)
        return bool(self.stylesheets_for(namespace))

    # --- clearing -------------------------------------------------------------

    def clear(self, namespace: object = None) -> None:
        """Forget request-scoped inline CSS; the file manifest is kept."""
        if namespace is None:
            self._inline.set({})
            return
        current = dict(self._inline.get() or {})
        current.pop(normalize_namespace(namespace), None)
        self._inline.set(current)

    def clear_manifest(self, namespace: object = None) -> None:
        with self._lock:
            if namespace is None:
                self._manifest.clear()
            else:
                self._manifest.pop(normalize_namespace(namespace), None)

    # --- rendering ------------------------------------------------------------

    def render_head_stylesheets(
        self,
        namespace: object = None,
        link_renderer: LinkRenderer | None = None,
        assets_url: str = DEFAULT_ASSETS_URL,
    ) -> Markup:
        """Render ``<link>`` and ``<style>`` tags and clear the rendered inline CSS.

        Without a namespace every namespace is rendered: all files first,
        then all inline CSS. File hrefs are built as
        ``<assets_url>/<file_path>.css`` unless *link_renderer* is given.
        """
        if namespace is None or not str(namespace).strip():
            stylesheets: list[FileStylesheet | InlineStylesheet] = []
            for entries in self.manifest_files().values():
                stylesheets.extend(entries)
            for items in self.request_inline_stylesheets().values():
                stylesheets.extend(items)
            self.clear()
        else:
            stylesheets = self.stylesheets_for(namespace)
            self.clear(namespace)

        tags = [self._render(s, link_renderer, assets_url) for s in stylesheets]
        return Markup("\n").join(tags)

    @staticmethod
    def _render(
        stylesheet: FileStylesheet | InlineStylesheet,
        link_renderer: LinkRenderer | None,
        assets_url: str,
    ) -> Markup:
        if isinstance(stylesheet, InlineStylesheet):
            # Scoped CSS comes from component code and is not HTML-escaped.
            return Markup('<style type="text/css">') + Markup(stylesheet.css) + Markup("</style>")
        if link_renderer is not None:
            return Markup(link_renderer(stylesheet.file_path, stylesheet.attrs))
        attrs = "".join(f' {escape(k)}="{escape(v)}"' for k, v in stylesheet.options)
        href = escape(f"{assets_url.rstrip('/')}/{stylesheet.file_path}.css")
        return Markup(f'<link rel="stylesheet" href="{href}"{attrs}>')
