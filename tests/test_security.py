"""
Tests for security module - InputSanitizer, SecureString, OutputRedactor.
"""

import pytest

from tfbackend.errors import ErrorKind, ValidationError
from tfbackend.security import InputSanitizer, OutputRedactor, SecureString


def test_sanitize_short_name_valid():
    """Test names within [6, 13] are returned unchanged."""
    valid_names = [
        "abcdef",
        "myproj01",
        "abcdefghijklm",
        "MixedCase99",
    ]

    for name in valid_names:
        assert InputSanitizer.sanitize_short_name(name) == name


def test_sanitize_short_name_invalid_length():
    """Test names outside [6, 13] raise ValidationError."""
    invalid_names = [
        "",
        "a",
        "abcde",
        "abcdefghijklmn",
    ]

    for name in invalid_names:
        with pytest.raises(ValidationError) as exc_info:
            InputSanitizer.sanitize_short_name(name)
        assert exc_info.value.kind is ErrorKind.VALIDATION
        assert exc_info.value.message == f'shortName:"{name}" must be of length [6-13]'


def test_sanitize_short_name_none():
    with pytest.raises(ValidationError):
        InputSanitizer.sanitize_short_name(None)


def test_sanitize_short_name_custom_bounds():
    assert InputSanitizer.sanitize_short_name("abc", lower=3, upper=4) == "abc"
    with pytest.raises(ValidationError) as exc_info:
        InputSanitizer.sanitize_short_name("abcde", lower=3, upper=4)
    assert "[3-4]" in exc_info.value.message


def test_is_safe_command_arg():
    """Test command argument safety check."""
    assert InputSanitizer.is_safe_command_arg("rg-terraform-myproj01")
    assert InputSanitizer.is_safe_command_arg("[0].value")
    assert InputSanitizer.is_safe_command_arg("")

    assert not InputSanitizer.is_safe_command_arg("bad\x00arg")
    assert not InputSanitizer.is_safe_command_arg("x" * 20000)
    assert not InputSanitizer.is_safe_command_arg(None)


# ---------------------------------------------------------------------------
# SecureString
# ---------------------------------------------------------------------------

def test_secure_string_hides_value():
    secret = SecureString("key-abc")
    assert str(secret) == "[REDACTED]"
    assert "key-abc" not in repr(secret)
    assert f"{secret}" == "[REDACTED]"
    assert secret.get_value() == "key-abc"


def test_secure_string_clear():
    secret = SecureString("key-abc")
    secret.clear()
    with pytest.raises(ValueError):
        secret.get_value()
    # Idempotent
    secret.clear()


def test_secure_string_context_manager():
    with SecureString("key-abc") as secret:
        assert secret.get_value() == "key-abc"
    with pytest.raises(ValueError):
        secret.get_value()


# ---------------------------------------------------------------------------
# OutputRedactor
# ---------------------------------------------------------------------------

def test_redactor_replaces_all_occurrences():
    redactor = OutputRedactor({"key": SecureString("key-abc")})
    text = "--account-key key-abc and again key-abc"
    assert redactor.redact(text) == "--account-key [REDACTED] and again [REDACTED]"


def test_redactor_keeps_value_after_secure_string_cleared():
    secret = SecureString("key-abc")
    redactor = OutputRedactor({"key": secret})
    secret.clear()
    assert redactor.redact("key-abc") == "[REDACTED]"


def test_redactor_skips_cleared_and_plain_values():
    cleared = SecureString("gone")
    cleared.clear()
    redactor = OutputRedactor({"a": cleared, "b": "plain-string"})
    assert redactor.sensitive_values == []
    assert redactor.redact("plain-string gone") == "plain-string gone"


def test_redactor_empty_text():
    redactor = OutputRedactor({"key": SecureString("key-abc")})
    assert redactor.redact("") == ""
    assert redactor.redact(None) is None
