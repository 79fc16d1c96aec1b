"""Tests for cache key validation."""

import pytest

from shardcache.cache.keys import MAX_KEY_LENGTH, is_valid_key, validate_key
from shardcache.exceptions import InvalidKeyError


class TestIsValidKey:
    """Tests for the boolean validator."""

    @pytest.mark.parametrize(
        "key",
        ["a", "mytestfilecache", "Key_123", "_", "0", "x" * MAX_KEY_LENGTH],
    )
    def test_accepts_word_characters(self, key):
        """Test letters, digits and underscore are accepted."""
        assert is_valid_key(key) is True

    @pytest.mark.parametrize(
        "key",
        [
            "",
            "a/b",
            "../etc",
            "..",
            "a\\b",
            "what?",
            "testing.txt",
            "with space",
            "tab\t",
            "line\n",
            "café",
            "x" * (MAX_KEY_LENGTH + 1),
        ],
    )
    def test_rejects_unsafe_keys(self, key):
        """Test separators, traversal, punctuation and overlong keys are rejected."""
        assert is_valid_key(key) is False

    @pytest.mark.parametrize("key", [None, 42, b"bytes", ["a"]])
    def test_rejects_non_strings(self, key):
        """Test non-string values are rejected."""
        assert is_valid_key(key) is False


class TestValidateKey:
    """Tests for the strict validator."""

    def test_returns_valid_key(self):
        """Test a valid key is returned unchanged."""
        assert validate_key("abc_123") == "abc_123"

    def test_raises_on_invalid_key(self):
        """Test an invalid key raises with context."""
        with pytest.raises(InvalidKeyError) as exc_info:
            validate_key("a/b")

        assert exc_info.value.context["key"] == "a/b"
        assert "pattern" in exc_info.value.context
        assert "a/b" in str(exc_info.value)
