"""Post-create setup for new worktrees"""
import os
from dataclasses import dataclass
from typing import Callable, List, Optional

from worktree_wizard.constants import DEFAULT_SETUP_TIMEOUT, SETUP_MARKERS
from worktree_wizard.exceptions import SetupCommandError
from worktree_wizard.logging_config import get_logger
from worktree_wizard.utils.process import ProcessRunner

logger = get_logger(__name__)


@dataclass(frozen=True)
class SetupProgress:
    """Progress of a setup run; current is 1-based."""
    step: str
    current: int
    total: int


ProgressCallback = Callable[[SetupProgress], None]


class SetupService:
    """Runs a repository's configured setup commands inside a worktree."""

    def __init__(self, runner: Optional[ProcessRunner] = None, timeout: float = DEFAULT_SETUP_TIMEOUT):
        """Initialize the service.

        Args:
            runner: Command runner (a default ProcessRunner if omitted)
            timeout: Per-command timeout in seconds
        """
        self.runner = runner or ProcessRunner()
        self.timeout = timeout

    def run(
        self,
        worktree_path: str,
        commands: Optional[List[str]],
        on_progress: Optional[ProgressCallback] = None,
    ) -> None:
        """Run setup commands one after another through ``sh -c``.

        Stops at the first failing command; commands that already ran are
        not undone.

        Raises:
            SetupCommandError: Naming the failed command and its stderr
        """
        if not commands:
            return

        total = len(commands)
        for current, command in enumerate(commands, start=1):
            if on_progress:
                on_progress(SetupProgress(step=command, current=current, total=total))

            logger.info(f"Setup [{current}/{total}] in {worktree_path}: {command}")
            result = self.runner.run("sh", ["-c", command], cwd=worktree_path, timeout=self.timeout)
            if not result.ok:
                logger.error(f"Setup command failed (exit {result.exit_code}): {command}")
                raise SetupCommandError(command, result.stderr, current, total)

    @staticmethod
    def is_set_up(worktree_path: str) -> bool:
        """Check if a worktree looks set up (has node_modules or vendor)."""
        for marker in SETUP_MARKERS:
            if os.path.exists(os.path.join(worktree_path, marker)):
                return True
        return False
