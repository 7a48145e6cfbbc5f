"""
Handling for secret values captured from the Azure CLI.

This module provides:
- SecureString: Container that never renders its value
- OutputRedactor: Redacts secret values from log and echo text
"""

from typing import Dict, List, Optional


class SecureString:
    """
    Container for a sensitive string such as a storage account key.

    - Value stored privately
    - Cleared on deletion
    - No string representation (prevents accidental logging)
    - Context manager support

    Example:
        >>> key = SecureString("storage-key")
        >>> key.get_value()
        'storage-key'
        >>> str(key)
        '[REDACTED]'
    """

    def __init__(self, value: str):
        self._value: Optional[str] = value
        self._cleared = False

    def __del__(self):
        self.clear()

    def __str__(self) -> str:
        return "[REDACTED]"

    def __repr__(self) -> str:
        return "SecureString([REDACTED])"

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.clear()
        return False

    def get_value(self) -> str:
        """
        Get the actual sensitive value.

        Returns:
            The sensitive string value

        Raises:
            ValueError: If value has been cleared
        """
        if self._cleared or self._value is None:
            raise ValueError("SecureString value has been cleared")
        return self._value

    def clear(self):
        """
        Drop the sensitive value.

        After calling this, get_value() raises ValueError. Safe to call
        more than once.
        """
        self._value = None
        self._cleared = True


class OutputRedactor:
    """
    Redacts sensitive values from text output.

    Every line the runner echoes, and every command line it logs, is
    passed through redact() first.

    Example:
        >>> redactor = OutputRedactor({"key": SecureString("secret123")})
        >>> redactor.redact("--account-key secret123")
        '--account-key [REDACTED]'
    """

    REPLACEMENT = "[REDACTED]"

    def __init__(self, sensitive_variables: Optional[Dict[str, SecureString]] = None):
        """
        Args:
            sensitive_variables: Dict mapping names to SecureString values
        """
        self.sensitive_values: List[str] = []

        if sensitive_variables:
            self.add_sensitive_values(sensitive_variables)

    def add_sensitive_values(self, sensitive_variables: Dict[str, SecureString]):
        """
        Add sensitive values to the redaction list.

        Args:
            sensitive_variables: Dict mapping names to SecureString values
        """
        for secure_str in sensitive_variables.values():
            if isinstance(secure_str, SecureString):
                try:
                    value = secure_str.get_value()
                except ValueError:
                    # Already cleared, nothing to redact
                    continue
                if value and value not in self.sensitive_values:
                    self.sensitive_values.append(value)

    def redact(self, text: str) -> str:
        """
        Replace any occurrence of sensitive values with [REDACTED].

        Uses exact, case-sensitive string matching.

        Args:
            text: Text to redact

        Returns:
            Text with sensitive values replaced
        """
        if not text:
            return text

        redacted = text
        for sensitive_value in self.sensitive_values:
            redacted = redacted.replace(sensitive_value, self.REPLACEMENT)

        return redacted
