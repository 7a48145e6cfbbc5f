"""
Configuration management for tfbackend.

This module handles built-in defaults and optional JSON overrides.
"""

from .settings import Settings
from .defaults import DEFAULT_SETTINGS

__all__ = ["Settings", "DEFAULT_SETTINGS"]
