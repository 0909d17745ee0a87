"""Boundary checks run before any CSS is scanned."""

from __future__ import annotations

import re

from style_capsule.css.model import MAX_CAPSULE_ID_LENGTH, MAX_CSS_SIZE
from style_capsule.errors import InvalidCapsuleIdError, SizeExceededError

__all__ = ["validate_css_size", "validate_capsule_id", "is_blank"]

_CAPSULE_ID_RE = re.compile(r"[A-Za-z0-9_-]+")


def is_blank(css: str | None) -> bool:
    """True for None, empty or whitespace-only CSS."""
    return css is None or not css.strip()


def validate_css_size(css: str) -> None:
    """Raise SizeExceededError when *css* is larger than MAX_CSS_SIZE bytes."""
    size = len(css.encode("utf-8"))
    if size > MAX_CSS_SIZE:
        raise SizeExceededError(size, MAX_CSS_SIZE)


def validate_capsule_id(capsule_id: object) -> None:
    """Reject capsule ids that could break out of an attribute or a filename.

    The id is interpolated unescaped into ``[data-capsule="..."]`` and into
    cache filenames, so only ``[A-Za-z0-9_-]`` is allowed.
    """
    if not isinstance(capsule_id, str):
        raise InvalidCapsuleIdError(
            f"capsule_id must be a str (got {type(capsule_id).__name__})",
            capsule_id=capsule_id,
        )
    if not capsule_id:
        raise InvalidCapsuleIdError("capsule_id cannot be empty", capsule_id=capsule_id)
    if not _CAPSULE_ID_RE.fullmatch(capsule_id):
        raise InvalidCapsuleIdError(
            "Invalid capsule_id: must contain only alphanumeric characters, "
            f"hyphens, and underscores (got: {capsule_id!r})",
            capsule_id=capsule_id,
        )
    if len(capsule_id) > MAX_CAPSULE_ID_LENGTH:
        raise InvalidCapsuleIdError(
            f"Invalid capsule_id: too long (max {MAX_CAPSULE_ID_LENGTH} "
            f"characters, got {len(capsule_id)})",
            capsule_id=capsule_id,
        )
