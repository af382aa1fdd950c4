"""Tests for secret redaction."""

from snsnotify.utils.redaction import REDACTED, clear_registered_secrets, redact, register_secret


def test_registered_secret_masked():
    register_secret("topsecret")
    assert redact("key topsecret used twice: topsecret") == f"key {REDACTED} used twice: {REDACTED}"


def test_explicit_secrets_masked():
    """Test secrets passed per call without registering them."""
    assert redact("abc123 failed", secrets=["abc123"]) == "**** failed"
    assert redact("abc123 failed") == "abc123 failed"


def test_blank_secrets_ignored():
    """Test that empty secrets never mangle text."""
    register_secret("")
    register_secret("   ")
    register_secret(None)
    assert redact("nothing to hide", secrets=["", None]) == "nothing to hide"


def test_longest_secret_masked_first():
    """Test that a secret containing another is masked whole."""
    register_secret("abc")
    register_secret("abcdef")
    assert redact("abcdef") == REDACTED


def test_clear_registered_secrets():
    register_secret("topsecret")
    clear_registered_secrets()
    assert redact("topsecret") == "topsecret"


def test_empty_text_passthrough():
    register_secret("x1")
    assert redact("") == ""
