"""style_capsule: attribute-based CSS scoping for component encapsulation."""

__version__ = "1.0.0"

from style_capsule.component import StyledComponent  # noqa: E402
from style_capsule.config import StyleCapsuleConfig  # noqa: E402
from style_capsule.css import (  # noqa: E402
    ScopingStrategy,
    scope_css,
    scope_selectors,
    scope_with_nesting,
)
from style_capsule.errors import (  # noqa: E402
    ConfigurationError,
    InvalidCapsuleIdError,
    SizeExceededError,
    StyleCapsuleError,
    UnsafeFilenameError,
)
from style_capsule.helpers import (  # noqa: E402
    register_stylesheet,
    style_capsule,
    stylesheet_registry_tags,
)
from style_capsule.registry import (  # noqa: E402
    CacheStrategy,
    StylesheetRegistry,
    class_registry,
    stylesheet_registry,
)

__all__ = [
    "CacheStrategy",
    "ConfigurationError",
    "InvalidCapsuleIdError",
    "ScopingStrategy",
    "SizeExceededError",
    "StyleCapsuleConfig",
    "StyleCapsuleError",
    "StyledComponent",
    "StylesheetRegistry",
    "UnsafeFilenameError",
    "class_registry",
    "register_stylesheet",
    "scope_css",
    "scope_selectors",
    "scope_with_nesting",
    "style_capsule",
    "stylesheet_registry",
    "stylesheet_registry_tags",
]
