"""Flask extension exposing the template helpers to Jinja."""
from __future__ import annotations

import logging
from typing import Any

from flask import Flask, current_app
from markupsafe import Markup

from style_capsule.helpers import style_capsule
from style_capsule.registry import StylesheetRegistry, stylesheet_registry
from style_capsule.registry.stylesheets import DEFAULT_ASSETS_URL

logger = logging.getLogger("style_capsule.flask")


class StyleCapsule:
    """Make ``style_capsule``, ``register_stylesheet`` and
    ``stylesheet_registry_tags`` available in every template.

    Request-scoped inline CSS is cleared when each request is torn down.
    ``STYLE_CAPSULE_ASSETS_URL`` (default ``/assets``) prefixes the href of
    file-based stylesheets.
    """

    def __init__(self, app: Flask | None = None, registry: StylesheetRegistry | None = None) -> None:
        self.registry = registry or stylesheet_registry
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        app.config.setdefault("STYLE_CAPSULE_ASSETS_URL", DEFAULT_ASSETS_URL)
        app.extensions["style_capsule"] = self
        app.context_processor(self._template_context)
        app.teardown_request(self._clear_request_styles)
        logger.debug("StyleCapsule registered on app %s", app.name)

    def _template_context(self) -> dict[str, Any]:
        return {
            "style_capsule": style_capsule,
            "register_stylesheet": self.register_stylesheet,
            "stylesheet_registry_tags": self.stylesheet_registry_tags,
        }

    def _clear_request_styles(self, exc: BaseException | None = None) -> None:
        self.registry.clear()

    def register_stylesheet(self, file_path: str, namespace: object = None, **options: Any) -> str:
        # Returns an empty string so it can be used inside {{ ... }}.
        self.registry.register(file_path, namespace=namespace, **options)
        return ""

    def stylesheet_registry_tags(self, namespace: object = None) -> Markup:
        return self.registry.render_head_stylesheets(
            namespace=namespace, assets_url=current_app.config["STYLE_CAPSULE_ASSETS_URL"]
        )
