"""Scoping constants and the strategy enum shared by the CSS rewriters."""

from __future__ import annotations

from enum import StrEnum

from style_capsule.errors import ConfigurationError

# Upper bound on input size; also bounds the cost of the rule-boundary scan.
MAX_CSS_SIZE = 1_000_000

MAX_CAPSULE_ID_LENGTH = 100

CAPSULE_ATTRIBUTE = "data-capsule"

# Substring marking a selector that has already been scoped.
SCOPE_MARKER = f"[{CAPSULE_ATTRIBUTE}="


class ScopingStrategy(StrEnum):
    """How a component's CSS is confined to its capsule.

    SELECTOR_PATCHING prefixes every selector with the capsule attribute and
    works in every browser. NESTING wraps the whole stylesheet in one block
    and needs native CSS nesting (Chrome 112+, Firefox 117+, Safari 16.5+).
    """

    SELECTOR_PATCHING = "selector_patching"
    NESTING = "nesting"

    @classmethod
    def coerce(cls, value: ScopingStrategy | str) -> ScopingStrategy:
        """Return *value* as a ScopingStrategy, raising on unknown names."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            allowed = ", ".join(s.value for s in cls)
            raise ConfigurationError(
                f"css_scoping_strategy must be one of {allowed} (got: {value!r})"
            ) from None


def capsule_selector(capsule_id: str) -> str:
    """Return the attribute selector ``[data-capsule="<id>"]``."""
    return f'[{CAPSULE_ATTRIBUTE}="{capsule_id}"]'
