"""Write scoped CSS to files so browsers and CDNs can cache it."""
from __future__ import annotations

import errno
import logging
import re
import tempfile
from pathlib import Path

from style_capsule.config import StyleCapsuleConfig
from style_capsule.errors import UnsafeFilenameError
from style_capsule.events import CssFileFallback, CssFileWriteFailed, CssFileWritten
from style_capsule.instrumentation import component_name, notify

logger = logging.getLogger("style_capsule.writer")

MAX_FILENAME_LENGTH = 255

_SAFE_FILENAME_RE = re.compile(r"[A-Za-z0-9._-]+\.css")


def validate_filename(filename: str) -> None:
    """Reject filenames that could leave the output directory."""
    if ".." in filename or "/" in filename or "\\" in filename:
        raise UnsafeFilenameError(
            f"Invalid filename: path traversal detected in {filename!r}", filename=filename
        )
    if "\0" in filename:
        raise UnsafeFilenameError("Invalid filename: null byte detected", filename=filename)
    if len(filename) > MAX_FILENAME_LENGTH:
        raise UnsafeFilenameError(
            f"Invalid filename: too long (max {MAX_FILENAME_LENGTH} characters, "
            f"got {len(filename)})",
            filename=filename,
        )
    if not _SAFE_FILENAME_RE.fullmatch(filename):
        raise UnsafeFilenameError(
            "Invalid filename: only alphanumeric characters, dots, hyphens and "
            "underscores are allowed and the name must end with .css",
            filename=filename,
        )


def _is_permission_error(exc: OSError) -> bool:
    return isinstance(exc, PermissionError) or exc.errno == errno.EROFS


class CssFileWriter:
    """Writes one CSS file per (component, capsule id) under ``output_dir``.

    Paths returned by ``write_css`` and ``file_path_for`` are relative to
    ``assets_root`` and carry no ``.css`` suffix, ready to be used as a
    stylesheet reference. When the output directory is not below the
    assets root, the bare filename stem is returned instead.

    If the output directory is not writable the file goes to a
    ``style_capsule`` directory under the system temp dir.
    """

    def __init__(self, config: StyleCapsuleConfig | None = None) -> None:
        self.config = config or StyleCapsuleConfig()
        self._fallback_dir: Path | None = None

    @property
    def enabled(self) -> bool:
        return self.config.enabled

    @property
    def output_dir(self) -> Path:
        if self._fallback_dir is not None:
            return self._fallback_dir
        return Path(self.config.output_dir)

    @property
    def assets_root(self) -> Path:
        return Path(self.config.assets_root)

    # --- writing --------------------------------------------------------------

    def write_css(self, css: str, component: object, capsule_id: str) -> str | None:
        """Write *css* and return its reference path, or None when disabled."""
        if not self.enabled:
            return None

        filename = self.filename_for(component, capsule_id)
        target = self.output_dir / filename
        try:
            self._write(target, css)
        except OSError as exc:
            if not (_is_permission_error(exc) and self.config.fallback_to_tempdir):
                notify(
                    CssFileWriteFailed(
                        component=component_name(component),
                        capsule_id=capsule_id,
                        file_path=str(target),
                        error=f"{type(exc).__name__}: {exc}",
                    )
                )
                logger.error("Failed to write CSS file %s: %s", target, exc)
                raise
            target = self._write_fallback(target, css, component, capsule_id, exc)

        notify(
            CssFileWritten(
                component=component_name(component),
                capsule_id=capsule_id,
                file_path=str(target),
                size=len(css.encode("utf-8")),
            )
        )
        logger.info("Wrote CSS file %s", target)
        return self._reference_for(target)

    def _write(self, target: Path, css: str) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(css, encoding="utf-8")

    def _write_fallback(
        self, original: Path, css: str, component: object, capsule_id: str, cause: OSError
    ) -> Path:
        fallback_dir = Path(tempfile.gettempdir()) / "style_capsule"
        target = fallback_dir / original.name
        try:
            self._write(target, css)
        except OSError as exc:
            notify(
                CssFileWriteFailed(
                    component=component_name(component),
                    capsule_id=capsule_id,
                    file_path=str(target),
                    error=f"{type(exc).__name__}: {exc}",
                )
            )
            logger.error("Fallback CSS write to %s failed: %s", target, exc)
            raise

        logger.warning(
            "Output directory %s is not writable (%s); using %s",
            original.parent,
            cause,
            fallback_dir,
        )
        notify(
            CssFileFallback(
                component=component_name(component),
                capsule_id=capsule_id,
                original_path=str(original),
                fallback_path=str(target),
                error=f"{type(cause).__name__}: {cause}",
            )
        )
        self._fallback_dir = fallback_dir
        return target

    # --- lookup ---------------------------------------------------------------

    def filename_for(self, component: object, capsule_id: str) -> str:
        """Apply the configured filename pattern and validate the result."""
        filename = self.config.filename_pattern(component, capsule_id)
        if not filename.endswith(".css"):
            filename = f"{filename}.css"
        validate_filename(filename)
        return filename

    def file_exists(self, component: object, capsule_id: str) -> bool:
        if not self.enabled:
            return False
        return (self.output_dir / self.filename_for(component, capsule_id)).is_file()

    def file_path_for(self, component: object, capsule_id: str) -> str | None:
        """Reference path of an already written file, or None."""
        if not self.enabled:
            return None
        target = self.output_dir / self.filename_for(component, capsule_id)
        if not target.is_file():
            return None
        return self._reference_for(target)

    def _reference_for(self, target: Path) -> str:
        try:
            relative = target.relative_to(self.assets_root)
        except ValueError:
            return target.stem
        return relative.with_suffix("").as_posix()

    # --- housekeeping ---------------------------------------------------------

    def ensure_output_directory(self) -> None:
        if self.enabled:
            self.output_dir.mkdir(parents=True, exist_ok=True)

    def clear_files(self) -> int:
        """Delete every generated ``*.css`` file and return how many were removed."""
        if not self.enabled or not self.output_dir.is_dir():
            return 0
        removed = 0
        for path in self.output_dir.glob("*.css"):
            path.unlink()
            removed += 1
        logger.info("Removed %d CSS file(s) from %s", removed, self.output_dir)
        return removed
