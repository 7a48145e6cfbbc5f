"""
Input validation for tfbackend.

This module validates pipeline inputs before they are used to derive
resource names, and checks command arguments before they are handed
to subprocess.
"""

from ..errors import ValidationError


class InputSanitizer:
    """
    Provides input validation methods.

    Validation failures raise ValidationError.
    """

    # Resource names are derived from the short name; the storage account
    # name (stterraform + short name) must stay within Azure's 24 char limit.
    SHORT_NAME_MIN_LENGTH = 6
    SHORT_NAME_MAX_LENGTH = 13

    MAX_COMMAND_ARG_LENGTH = 10000

    @staticmethod
    def sanitize_short_name(
        value: str,
        lower: int = SHORT_NAME_MIN_LENGTH,
        upper: int = SHORT_NAME_MAX_LENGTH,
    ) -> str:
        """
        Validate the short name used to derive every resource name.

        Only the length is enforced; the value is returned unchanged.

        Args:
            value: Short name supplied by the pipeline
            lower: Minimum length (inclusive)
            upper: Maximum length (inclusive)

        Returns:
            The validated short name

        Raises:
            ValidationError: If the length is outside [lower, upper]
        """
        if value is None:
            value = ""

        if len(value) < lower or len(value) > upper:
            raise ValidationError(
                f'shortName:"{value}" must be of length [{lower}-{upper}]'
            )

        return value

    @staticmethod
    def is_safe_command_arg(arg: str) -> bool:
        """
        Check if a command argument is safe to pass to subprocess.

        Commands are always run with shell=False; this rejects the
        arguments that would still break argv handling.

        Args:
            arg: Command argument to check

        Returns:
            True if safe, False otherwise
        """
        if not isinstance(arg, str):
            return False

        # Null bytes truncate argv entries on POSIX
        if '\x00' in arg:
            return False

        if len(arg) > InputSanitizer.MAX_COMMAND_ARG_LENGTH:
            return False

        return True
