"""
Validation utilities for tfbackend.
"""

import shutil

from ..errors import CommandError


def resolve_cli_path(binary: str = "az") -> str:
    """
    Locate an executable on PATH.

    Args:
        binary: Name or path of the executable

    Returns:
        Absolute path to the executable

    Raises:
        CommandError: If the executable cannot be found
    """
    path = shutil.which(binary)
    if not path:
        raise CommandError(f"Unable to locate executable file: {binary}")
    return path
