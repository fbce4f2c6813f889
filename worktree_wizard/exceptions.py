"""Custom exceptions for worktree-wizard"""

from typing import TYPE_CHECKING, Optional, Sequence

if TYPE_CHECKING:
    from worktree_wizard.utils.process import CommandResult


class WorktreeWizardError(Exception):
    """Base exception for all worktree-wizard errors."""
    pass


class CommandError(WorktreeWizardError):
    """Raised when an external command exits non-zero or times out."""

    def __init__(self, command: str, args: Sequence[str], result: "CommandResult"):
        self.command = command
        self.args_list = list(args)
        self.result = result
        self.exit_code = result.exit_code
        self.stderr = result.stderr

        message = result.stderr.strip()
        if not message:
            message = " ".join(["Command failed:", command, *self.args_list])

        super().__init__(message)


class ParseError(WorktreeWizardError):
    """Raised when structured output from an external tool cannot be decoded."""

    def __init__(self, context: str, message: str):
        self.context = context
        self.message = message
        super().__init__(f"Failed to parse {context} response: {message}")


class GitOperationError(WorktreeWizardError):
    """A git failure translated into a user-facing message."""

    def __init__(self, operation: str, message: str, path: Optional[str] = None):
        self.operation = operation
        self.message = message
        self.path = path
        super().__init__(message)


class RepositoryNotFoundError(WorktreeWizardError):
    """Raised when no git repository can be found."""

    def __init__(self, path: str, message: Optional[str] = None):
        self.path = path
        error_msg = f"Not a git repository: {path}"
        if message:
            error_msg += f" ({message})"
        super().__init__(error_msg)


class SetupCommandError(WorktreeWizardError):
    """Raised when a post-create setup command fails."""

    def __init__(self, command: str, stderr: str, step: int, total: int):
        self.command = command
        self.stderr = stderr
        self.step = step
        self.total = total
        super().__init__(f"Command failed: {command}\n{stderr}")


class UnsupportedTerminalError(WorktreeWizardError):
    """Raised when the configured terminal type has no adapter."""

    def __init__(self, terminal_type: str):
        self.terminal_type = terminal_type
        super().__init__(f"Unknown terminal type: {terminal_type}")
