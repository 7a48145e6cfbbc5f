"""
Pipeline step I/O.

Implements the GitHub Actions workflow-command protocol: inputs come
from INPUT_* variables, outputs and exported variables go to the files
named by GITHUB_OUTPUT / GITHUB_ENV, and masks and errors are written
to stdout as ::command:: lines.
"""

import os
import sys
import uuid
from typing import Dict, MutableMapping, Optional, TextIO

from ..errors import ValidationError


def escape_data(value: str) -> str:
    """Escape a value for use as workflow-command data."""
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def escape_property(value: str) -> str:
    """Escape a value for use as a workflow-command property."""
    return (
        escape_data(value)
        .replace(":", "%3A")
        .replace(",", "%2C")
    )


class WorkflowContext:
    """
    Inputs, outputs and status of the current pipeline step.

    Attributes:
        environ: Environment mapping read and updated by this context
        outputs: Every output set during the run, by name
        exit_code: 0 until set_failed() is called, then 1
    """

    def __init__(
        self,
        environ: Optional[MutableMapping[str, str]] = None,
        stream: Optional[TextIO] = None,
    ):
        self.environ = os.environ if environ is None else environ
        self._stream = stream
        self.outputs: Dict[str, str] = {}
        self.exit_code = 0

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    @property
    def repository(self) -> Optional[str]:
        return self.environ.get("GITHUB_REPOSITORY")

    @property
    def is_debug(self) -> bool:
        return (
            self.environ.get("RUNNER_DEBUG") == "1"
            or self.environ.get("ACTIONS_STEP_DEBUG", "").lower() == "true"
        )

    def get_input(self, name: str, required: bool = False) -> str:
        """
        Read a step input.

        Args:
            name: Input name as declared by the step (e.g. "shortName")
            required: Raise when the input is missing or empty

        Returns:
            The input value, stripped; "" when not supplied

        Raises:
            ValidationError: If required and not supplied
        """
        key = f"INPUT_{name.replace(' ', '_').upper()}"
        value = self.environ.get(key, "").strip()
        if required and not value:
            raise ValidationError(f"Input required and not supplied: {name}")
        return value

    def set_output(self, name: str, value: str):
        """Publish a step output."""
        value = "" if value is None else str(value)
        self.outputs[name] = value

        output_file = self.environ.get("GITHUB_OUTPUT")
        if output_file:
            self._append_file_command(output_file, name, value)
        else:
            self._issue_command("set-output", value, name=name)

    def export_variable(self, name: str, value: str):
        """Set an environment variable for this process and later steps."""
        value = "" if value is None else str(value)
        self.environ[name] = value

        env_file = self.environ.get("GITHUB_ENV")
        if env_file:
            self._append_file_command(env_file, name, value)
        else:
            self._issue_command("set-env", value, name=name)

    def set_secret(self, value: str):
        """Register a value to be masked in the pipeline log."""
        if value:
            self._issue_command("add-mask", value)

    def set_failed(self, message: str):
        """Mark the step as failed with the given message."""
        self.exit_code = 1
        self._issue_command("error", message)

    def _issue_command(self, command: str, message: str, **properties: str):
        props = ",".join(
            f"{key}={escape_property(str(value))}" for key, value in properties.items()
        )
        header = f"{command} {props}" if props else command
        self.stream.write(f"::{header}::{escape_data(message)}\n")
        self.stream.flush()

    @staticmethod
    def _append_file_command(file_path: str, name: str, value: str):
        delimiter = f"ghadelimiter_{uuid.uuid4()}"
        # The delimiter must not appear in either part of the entry
        if delimiter in name or delimiter in value:
            raise ValueError(f"Unexpected input: value contains the delimiter {delimiter}")
        with open(file_path, "a", encoding="utf-8") as f:
            f.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
