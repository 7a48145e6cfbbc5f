"""
Security module for tfbackend.

Input validation for pipeline inputs and command arguments, plus
redaction of secret values before anything reaches the log.
"""

from .sanitizer import InputSanitizer
from .secure_memory import SecureString, OutputRedactor

__all__ = ["InputSanitizer", "SecureString", "OutputRedactor"]
