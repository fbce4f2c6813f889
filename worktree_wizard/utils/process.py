"""External command execution for worktree-wizard."""

import shutil
import subprocess
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from worktree_wizard.constants import DEFAULT_COMMAND_TIMEOUT, TIMEOUT_EXIT_CODE
from worktree_wizard.exceptions import CommandError
from worktree_wizard.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class CommandResult:
    """Captured outcome of an external command."""

    stdout: str
    stderr: str
    exit_code: int

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


@dataclass
class Availability:
    """Commands partitioned by whether they are on the search path."""

    available: List[str] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)


def _format_command(command: str, args: Sequence[str]) -> str:
    return " ".join([command, *args])


class ProcessRunner:
    """Runs external commands and folds every failure into a CommandResult."""

    def __init__(self, timeout: float = DEFAULT_COMMAND_TIMEOUT):
        """Initialize the runner.

        Args:
            timeout: Default per-command timeout in seconds
        """
        self.timeout = timeout

    def run(
        self,
        command: str,
        args: Sequence[str] = (),
        cwd: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> CommandResult:
        """Run a command and capture its output.

        Never raises for a non-zero exit, a spawn failure or a timeout.

        Args:
            command: Executable to run
            args: Arguments passed to the executable
            cwd: Working directory for the command
            timeout: Seconds before the command is killed (defaults to the runner's timeout)

        Returns:
            CommandResult. A timeout yields exit code 124; a spawn failure
            yields exit code 1 with the failure message on stderr.
        """
        limit = self.timeout if timeout is None else timeout
        argv = [command, *args]
        logger.debug(f"Running: {_format_command(command, args)} (cwd={cwd or '.'})")

        try:
            completed = subprocess.run(
                argv,
                cwd=cwd,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=limit,
            )
        except subprocess.TimeoutExpired:
            logger.debug(f"Timed out after {limit:g}s: {_format_command(command, args)}")
            return CommandResult(
                stdout="",
                stderr=f"Command timed out after {limit:g}s: {_format_command(command, args)}",
                exit_code=TIMEOUT_EXIT_CODE,
            )
        except (OSError, ValueError) as e:
            logger.debug(f"Could not start {command}: {e}")
            return CommandResult(stdout="", stderr=str(e), exit_code=1)

        if completed.returncode != 0:
            logger.debug(
                f"{command} exited {completed.returncode}: {completed.stderr.strip()}"
            )
        return CommandResult(
            stdout=completed.stdout,
            stderr=completed.stderr,
            exit_code=completed.returncode,
        )

    def run_strict(
        self,
        command: str,
        args: Sequence[str] = (),
        cwd: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> str:
        """Run a command and return its stdout.

        Raises:
            CommandError: If the command exits non-zero or times out
        """
        result = self.run(command, args, cwd=cwd, timeout=timeout)
        if not result.ok:
            raise CommandError(command, args, result)
        return result.stdout

    @staticmethod
    def command_exists(name: str) -> bool:
        """Check whether an executable is on the search path."""
        return shutil.which(name) is not None

    def check_availability(self, names: Sequence[str]) -> Availability:
        """Partition commands into available and missing ones."""
        availability = Availability()
        for name in names:
            if self.command_exists(name):
                availability.available.append(name)
            else:
                availability.missing.append(name)
        return availability
