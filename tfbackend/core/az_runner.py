"""
Azure CLI command execution.

Runs az with an explicit executable path, streams output to the log
unless the call is silent, and turns failures into CommandError.
"""

import logging
import subprocess
import threading
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from ..errors import CommandError
from ..security import InputSanitizer, OutputRedactor
from ..utils import subprocess_creation_flags

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Result of an az command execution."""
    exit_code: int
    stdout: str
    stderr: str
    success: bool
    command: str  # redacted command line


class AzCliRunner:
    """
    Executes Azure CLI commands.

    - shell=False always; arguments are passed as a list
    - every argument checked with InputSanitizer.is_safe_command_arg()
    - echoed lines and logged command lines are redacted
    - silent calls echo nothing; use them for anything that returns a secret
    - no timeout unless one is configured
    """

    def __init__(
        self,
        cli_path: str,
        redactor: Optional[OutputRedactor] = None,
        env: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
    ):
        self.cli_path = cli_path
        self.env = env
        self._redactor = redactor or OutputRedactor()
        self._timeout = timeout

    @property
    def redactor(self) -> OutputRedactor:
        return self._redactor

    def run(self, args: Sequence[str], silent: bool = False) -> CommandResult:
        """
        Run an az command whose output is only informational.

        Raises:
            CommandError: If the process exits non-zero
        """
        result = self._execute(self._build_command(args), silent)
        if not result.success:
            raise CommandError(
                self._failure_message(result),
                exit_code=result.exit_code,
                stderr=self._redactor.redact(result.stderr),
            )
        return result

    def capture(self, args: Sequence[str], silent: bool = False) -> str:
        """
        Run an az command and return its stdout.

        Any text on stderr is treated as a failure, even with exit code 0.

        Returns:
            stdout with surrounding whitespace removed

        Raises:
            CommandError: On non-zero exit or non-empty stderr
        """
        result = self._execute(self._build_command(args), silent)
        if not result.success or result.stderr.strip():
            raise CommandError(
                self._failure_message(result),
                exit_code=result.exit_code,
                stderr=self._redactor.redact(result.stderr),
            )
        return result.stdout.strip()

    def _build_command(self, args: Sequence[str]) -> List[str]:
        """Construct the argv list [cli_path, *args]."""
        cmd = [self.cli_path]
        for index, arg in enumerate(args):
            if not InputSanitizer.is_safe_command_arg(arg):
                raise CommandError(f"Unsafe command argument at position {index}")
            cmd.append(arg)
        return cmd

    def _failure_message(self, result: CommandResult) -> str:
        stderr = result.stderr.strip()
        if stderr:
            return self._redactor.redact(stderr)
        return f"The process '{self.cli_path}' failed with exit code {result.exit_code}"

    def _execute(self, cmd: List[str], silent: bool = False) -> CommandResult:
        """
        Execute a command and collect its output.

        stdout and stderr are read on helper threads while the calling
        thread waits on the process, so a configured timeout bounds the
        whole run.
        Captured text is kept unredacted so callers can use returned
        values; only what goes to the log is redacted.
        """
        display = self._redactor.redact(" ".join(cmd))
        if silent:
            logger.debug(f"Running: {display}")
        else:
            logger.info(f"Running: {display}")

        stdout_lines: List[str] = []
        stderr_lines: List[str] = []

        try:
            process = subprocess.Popen(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
                shell=False,
                env=self.env,
                creationflags=subprocess_creation_flags(),
            )
        except OSError as e:
            raise CommandError(f"Failed to start {cmd[0]}: {e}")

        def _pump(stream, lines: List[str], log_level: int):
            for line in stream:
                line = line.rstrip("\n")
                lines.append(line)
                if not silent:
                    logger.log(log_level, self._redactor.redact(line))

        readers = [
            threading.Thread(
                target=_pump,
                args=(process.stdout, stdout_lines, logging.INFO),
                daemon=True,
            ),
            threading.Thread(
                target=_pump,
                args=(process.stderr, stderr_lines, logging.WARNING),
                daemon=True,
            ),
        ]
        for reader in readers:
            reader.start()

        try:
            process.wait(timeout=self._timeout)
        except subprocess.TimeoutExpired:
            process.kill()
            process.wait()
            # A grandchild may still hold the pipes open
            for reader in readers:
                reader.join(timeout=self._timeout)
            raise CommandError(
                f"Command timed out after {self._timeout}s: {display}"
            )

        # Pipes close once the process exits; drain what is left
        for reader in readers:
            reader.join()

        exit_code = process.returncode

        return CommandResult(
            exit_code=exit_code,
            stdout="\n".join(stdout_lines),
            stderr="\n".join(stderr_lines),
            success=exit_code == 0,
            command=display,
        )
