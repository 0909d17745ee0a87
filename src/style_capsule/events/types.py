"""Event types emitted while scoping, writing and registering CSS."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CssScoped:
    strategy: str
    component: str
    capsule_id: str
    input_size: int
    output_size: int
    duration: float  # seconds


@dataclass(frozen=True)
class CssFileWritten:
    component: str
    capsule_id: str
    file_path: str
    size: int


@dataclass(frozen=True)
class CssFileFallback:
    component: str
    capsule_id: str
    original_path: str
    fallback_path: str
    error: str


@dataclass(frozen=True)
class CssFileWriteFailed:
    component: str
    capsule_id: str
    file_path: str
    error: str


@dataclass(frozen=True)
class StylesheetRegistered:
    namespace: str
    cache_strategy: str
    file_path: str | None = None
    inline_size: int | None = None
