"""Tests for CssFileWriter and filename validation."""

from pathlib import Path

import pytest

from style_capsule.config import StyleCapsuleConfig, default_filename_pattern
from style_capsule.errors import InvalidCapsuleIdError, UnsafeFilenameError
from style_capsule.events import CssFileFallback, CssFileWriteFailed, CssFileWritten
from style_capsule.instrumentation import bus
from style_capsule.writer import CssFileWriter, validate_filename


class Card:
    pass


@pytest.fixture
def config(tmp_path):
    return StyleCapsuleConfig(
        output_dir=str(tmp_path / "assets" / "builds" / "capsules"),
        assets_root=str(tmp_path / "assets"),
    )


@pytest.fixture
def writer(config):
    return CssFileWriter(config)


# ---------------------------------------------------------------------------
# Filename validation
# ---------------------------------------------------------------------------


class TestValidateFilename:
    @pytest.mark.parametrize("name", ["capsule-abc.css", "a_b.c.css", "X-1.css"])
    def test_safe(self, name):
        validate_filename(name)

    @pytest.mark.parametrize("name", ["../x.css", "a/b.css", "a\\b.css"])
    def test_path_traversal(self, name):
        with pytest.raises(UnsafeFilenameError, match="path traversal"):
            validate_filename(name)

    def test_null_byte(self):
        with pytest.raises(UnsafeFilenameError, match="null byte"):
            validate_filename("a\0.css")

    def test_too_long(self):
        with pytest.raises(UnsafeFilenameError, match="too long"):
            validate_filename("a" * 252 + ".css")

    @pytest.mark.parametrize("name", ["capsule.txt", "caps ule.css", "capsule"])
    def test_bad_characters_or_extension(self, name):
        with pytest.raises(UnsafeFilenameError) as exc_info:
            validate_filename(name)
        assert exc_info.value.filename == name


class TestDefaultFilenamePattern:
    def test_uses_capsule_id(self):
        assert default_filename_pattern(Card, "abc123") == "capsule-abc123.css"

    def test_strips_unsafe_characters(self):
        assert default_filename_pattern(Card, "ab/../c") == "capsule-abc.css"

    def test_rejects_id_without_safe_characters(self):
        with pytest.raises(InvalidCapsuleIdError):
            default_filename_pattern(Card, "../")


# ---------------------------------------------------------------------------
# Writing
# ---------------------------------------------------------------------------


class TestWriteCss:
    def test_writes_file_and_returns_reference(self, writer, config):
        ref = writer.write_css(".a { color: red; }", Card, "abc123")
        assert ref == "builds/capsules/capsule-abc123"
        written = Path(config.output_dir) / "capsule-abc123.css"
        assert written.read_text(encoding="utf-8") == ".a { color: red; }"

    def test_creates_output_directory(self, writer, config):
        assert not Path(config.output_dir).exists()
        writer.write_css(".a { }", Card, "abc123")
        assert Path(config.output_dir).is_dir()

    def test_disabled_writes_nothing(self, config):
        from dataclasses import replace

        writer = CssFileWriter(replace(config, enabled=False))
        assert writer.write_css(".a { }", Card, "abc123") is None
        assert not Path(config.output_dir).exists()
        assert writer.file_path_for(Card, "abc123") is None
        assert not writer.file_exists(Card, "abc123")

    def test_reference_outside_assets_root(self, tmp_path):
        writer = CssFileWriter(
            StyleCapsuleConfig(output_dir=str(tmp_path / "out"), assets_root=str(tmp_path / "assets"))
        )
        assert writer.write_css(".a { }", Card, "abc123") == "capsule-abc123"

    def test_custom_filename_pattern(self, tmp_path):
        config = StyleCapsuleConfig(
            output_dir=str(tmp_path / "assets" / "css"),
            assets_root=str(tmp_path / "assets"),
            filename_pattern=lambda component, capsule_id: f"{component.__name__.lower()}-{capsule_id}",
        )
        ref = CssFileWriter(config).write_css(".a { }", Card, "abc123")
        assert ref == "css/card-abc123"

    def test_unsafe_pattern_rejected(self, tmp_path):
        config = StyleCapsuleConfig(
            output_dir=str(tmp_path), filename_pattern=lambda c, i: "../evil.css"
        )
        with pytest.raises(UnsafeFilenameError):
            CssFileWriter(config).write_css(".a { }", Card, "abc123")

    def test_emits_written_event(self, writer):
        events = []
        bus.subscribe(CssFileWritten, events.append)
        writer.write_css(".a { }", Card, "abc123")
        assert len(events) == 1
        assert events[0].capsule_id == "abc123"
        assert events[0].size == len(".a { }")
        assert events[0].component.endswith("Card")


class TestWriteFallback:
    def _deny_output_dir(self, monkeypatch, writer, config, error):
        original = CssFileWriter._write
        denied = Path(config.output_dir)

        def fake_write(self, target, css):
            if target.parent == denied:
                raise error
            original(self, target, css)

        monkeypatch.setattr(CssFileWriter, "_write", fake_write)

    def test_permission_error_falls_back_to_tempdir(self, monkeypatch, tmp_path, writer, config):
        monkeypatch.setattr("tempfile.gettempdir", lambda: str(tmp_path / "tmp"))
        self._deny_output_dir(monkeypatch, writer, config, PermissionError("denied"))
        events = []
        bus.subscribe(CssFileFallback, events.append)

        ref = writer.write_css(".a { }", Card, "abc123")

        fallback = tmp_path / "tmp" / "style_capsule" / "capsule-abc123.css"
        assert fallback.read_text(encoding="utf-8") == ".a { }"
        assert ref == "capsule-abc123"
        assert writer.output_dir == tmp_path / "tmp" / "style_capsule"
        assert events[0].fallback_path == str(fallback)
        assert "PermissionError" in events[0].error

    def test_other_errors_propagate(self, monkeypatch, writer, config):
        self._deny_output_dir(monkeypatch, writer, config, OSError("disk full"))
        events = []
        bus.subscribe(CssFileWriteFailed, events.append)
        with pytest.raises(OSError, match="disk full"):
            writer.write_css(".a { }", Card, "abc123")
        assert len(events) == 1

    def test_fallback_disabled(self, monkeypatch, config):
        from dataclasses import replace

        writer = CssFileWriter(replace(config, fallback_to_tempdir=False))
        self._deny_output_dir(monkeypatch, writer, config, PermissionError("denied"))
        with pytest.raises(PermissionError):
            writer.write_css(".a { }", Card, "abc123")


# ---------------------------------------------------------------------------
# Lookup and housekeeping
# ---------------------------------------------------------------------------


class TestLookup:
    def test_file_path_for_missing(self, writer):
        assert writer.file_path_for(Card, "abc123") is None
        assert not writer.file_exists(Card, "abc123")

    def test_file_path_for_existing(self, writer):
        writer.write_css(".a { }", Card, "abc123")
        assert writer.file_exists(Card, "abc123")
        assert writer.file_path_for(Card, "abc123") == "builds/capsules/capsule-abc123"


class TestClearFiles:
    def test_removes_css_files_only(self, writer, config):
        writer.write_css(".a { }", Card, "abc123")
        writer.write_css(".b { }", Card, "def456")
        keep = Path(config.output_dir) / "notes.txt"
        keep.write_text("keep", encoding="utf-8")

        assert writer.clear_files() == 2
        assert keep.exists()
        assert list(Path(config.output_dir).glob("*.css")) == []

    def test_missing_directory(self, writer):
        assert writer.clear_files() == 0

    def test_ensure_output_directory(self, writer, config):
        writer.ensure_output_directory()
        assert Path(config.output_dir).is_dir()


class TestConfigFromEnv:
    def test_defaults(self):
        config = StyleCapsuleConfig.from_env({})
        assert config.output_dir == "assets/builds/capsules"
        assert config.assets_root == "assets"
        assert config.enabled

    def test_overrides(self):
        config = StyleCapsuleConfig.from_env(
            {
                "STYLE_CAPSULE_OUTPUT_DIR": "static/css",
                "STYLE_CAPSULE_ASSETS_ROOT": "static",
                "STYLE_CAPSULE_ENABLED": "false",
            }
        )
        assert config.output_dir == "static/css"
        assert config.assets_root == "static"
        assert not config.enabled
