"""
Error types raised during a provisioning run.

Every failure carries an ErrorKind so callers can tell validation,
command and postcondition failures apart without matching on text.
"""

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """Category of a provisioning failure."""
    VALIDATION = "validation"
    COMMAND = "command"
    POSTCONDITION = "postcondition"


class ProvisioningError(Exception):
    """Base class for all failures reported by the provisioner."""

    kind: ErrorKind = ErrorKind.COMMAND

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ProvisioningError):
    """Raised when a pipeline input is rejected."""

    kind = ErrorKind.VALIDATION


class CommandError(ProvisioningError):
    """Raised when an external command fails or cannot be launched."""

    kind = ErrorKind.COMMAND

    def __init__(
        self,
        message: str,
        exit_code: Optional[int] = None,
        stderr: str = "",
    ):
        super().__init__(message)
        self.exit_code = exit_code
        self.stderr = stderr


class PostconditionError(ProvisioningError):
    """Raised when an existence check fails after a create call."""

    kind = ErrorKind.POSTCONDITION

    def __init__(self, message: str, resource: str):
        super().__init__(message)
        self.resource = resource
