"""Tests for input validation and the scoping model."""

import pytest

from style_capsule.css import (
    MAX_CAPSULE_ID_LENGTH,
    MAX_CSS_SIZE,
    ScopingStrategy,
    capsule_selector,
    validate_capsule_id,
    validate_css_size,
)
from style_capsule.errors import (
    ConfigurationError,
    InvalidCapsuleIdError,
    SizeExceededError,
    StyleCapsuleError,
)


class TestValidateCssSize:
    def test_at_limit(self):
        validate_css_size("a" * MAX_CSS_SIZE)

    def test_over_limit(self):
        with pytest.raises(SizeExceededError) as exc_info:
            validate_css_size("a" * (MAX_CSS_SIZE + 1))
        assert exc_info.value.size == MAX_CSS_SIZE + 1
        assert exc_info.value.limit == MAX_CSS_SIZE

    def test_empty_is_fine(self):
        validate_css_size("")

    def test_error_hierarchy(self):
        assert issubclass(SizeExceededError, StyleCapsuleError)
        assert issubclass(SizeExceededError, ValueError)


class TestValidateCapsuleId:
    @pytest.mark.parametrize("capsule_id", ["abc123", "valid-id_123", "A", "a" * MAX_CAPSULE_ID_LENGTH])
    def test_valid(self, capsule_id):
        validate_capsule_id(capsule_id)

    @pytest.mark.parametrize(
        "capsule_id",
        ["", "a" * 101, "../etc", "<script>", 'x"]', "with space", "dot.ted", "ünï"],
    )
    def test_invalid(self, capsule_id):
        with pytest.raises(InvalidCapsuleIdError):
            validate_capsule_id(capsule_id)

    @pytest.mark.parametrize("capsule_id", [None, 123, b"abc", ["abc"]])
    def test_non_string(self, capsule_id):
        with pytest.raises(InvalidCapsuleIdError, match="must be a str") as exc_info:
            validate_capsule_id(capsule_id)
        assert exc_info.value.capsule_id == capsule_id

    def test_trailing_newline_rejected(self):
        with pytest.raises(InvalidCapsuleIdError, match="Invalid capsule_id"):
            validate_capsule_id("abc\n")

    def test_empty_message_checked_first(self):
        with pytest.raises(InvalidCapsuleIdError, match="cannot be empty"):
            validate_capsule_id("")


class TestModel:
    def test_capsule_selector(self):
        assert capsule_selector("abc123") == '[data-capsule="abc123"]'

    def test_strategy_values(self):
        assert ScopingStrategy.SELECTOR_PATCHING == "selector_patching"
        assert ScopingStrategy.NESTING == "nesting"

    def test_coerce_string(self):
        assert ScopingStrategy.coerce("nesting") is ScopingStrategy.NESTING

    def test_coerce_member(self):
        assert ScopingStrategy.coerce(ScopingStrategy.NESTING) is ScopingStrategy.NESTING

    def test_coerce_unknown(self):
        with pytest.raises(ConfigurationError):
            ScopingStrategy.coerce("bogus")
