from style_capsule.css.comments import strip_comments
from style_capsule.css.model import (
    CAPSULE_ATTRIBUTE,
    MAX_CAPSULE_ID_LENGTH,
    MAX_CSS_SIZE,
    ScopingStrategy,
    capsule_selector,
)
from style_capsule.css.scoping import scope_css, scope_selectors, scope_with_nesting
from style_capsule.css.validation import validate_capsule_id, validate_css_size

__all__ = [
    "CAPSULE_ATTRIBUTE",
    "MAX_CAPSULE_ID_LENGTH",
    "MAX_CSS_SIZE",
    "ScopingStrategy",
    "capsule_selector",
    "scope_css",
    "scope_selectors",
    "scope_with_nesting",
    "strip_comments",
    "validate_capsule_id",
    "validate_css_size",
]
