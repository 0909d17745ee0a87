"""Error hierarchy for style_capsule."""
from __future__ import annotations


class StyleCapsuleError(Exception):
    """Base error for all style_capsule errors."""


class SizeExceededError(StyleCapsuleError, ValueError):
    """CSS input is larger than the scoping engine accepts."""

    def __init__(self, size: int, limit: int, *, subject: str = "CSS content") -> None:
        super().__init__(
            f"{subject} exceeds maximum size of {limit} bytes (got {size} bytes)"
        )
        self.size = size
        self.limit = limit


class InvalidCapsuleIdError(StyleCapsuleError, ValueError):
    """A capsule id failed the type, emptiness, character or length checks."""

    def __init__(self, message: str, *, capsule_id: object = None) -> None:
        super().__init__(message)
        self.capsule_id = capsule_id


class UnsafeFilenameError(StyleCapsuleError):
    """A generated CSS filename could escape the output directory."""

    def __init__(self, message: str, *, filename: str = "") -> None:
        super().__init__(message)
        self.filename = filename


class ConfigurationError(StyleCapsuleError, ValueError):
    """A component or registry option has an unsupported value."""
