"""Package-wide settings for file output and scoping defaults."""
from __future__ import annotations

import os
import re
from dataclasses import dataclass
from typing import Callable

from style_capsule.css.model import ScopingStrategy
from style_capsule.errors import InvalidCapsuleIdError

DEFAULT_OUTPUT_DIR = "assets/builds/capsules"
DEFAULT_ASSETS_ROOT = "assets"

FilenamePattern = Callable[[object, str], str]


def default_filename_pattern(component: object, capsule_id: str) -> str:
    """Name a CSS file after its capsule id, which is unique per component."""
    safe_id = re.sub(r"[^A-Za-z0-9_-]", "", str(capsule_id))
    if not safe_id:
        raise InvalidCapsuleIdError(
            "Invalid capsule_id: must contain at least one alphanumeric character",
            capsule_id=capsule_id,
        )
    return f"capsule-{safe_id}.css"


@dataclass(frozen=True)
class StyleCapsuleConfig:
    output_dir: str = DEFAULT_OUTPUT_DIR
    assets_root: str = DEFAULT_ASSETS_ROOT
    enabled: bool = True
    filename_pattern: FilenamePattern = default_filename_pattern
    default_strategy: ScopingStrategy = ScopingStrategy.SELECTOR_PATCHING
    cleanup_interval: float = 300.0  # seconds between lazy inline-cache sweeps
    fallback_to_tempdir: bool = True

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> StyleCapsuleConfig:
        """Build a config from ``STYLE_CAPSULE_*`` environment variables."""
        env = os.environ if environ is None else environ
        enabled = env.get("STYLE_CAPSULE_ENABLED", "true").lower() not in ("0", "false", "no")
        return cls(
            output_dir=env.get("STYLE_CAPSULE_OUTPUT_DIR", DEFAULT_OUTPUT_DIR),
            assets_root=env.get("STYLE_CAPSULE_ASSETS_ROOT", DEFAULT_ASSETS_ROOT),
            enabled=enabled,
        )
