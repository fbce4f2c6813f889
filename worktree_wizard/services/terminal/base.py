"""Terminal adapter interface."""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional, Sequence

from worktree_wizard.logging_config import get_logger
from worktree_wizard.services.terminal.frames import TerminalFrame
from worktree_wizard.utils.process import CommandResult, ProcessRunner

logger = get_logger(__name__)

_FINDER_PROBE = """
try
  tell application "Finder"
    return exists application file id "{bundle_id}"
  end tell
on error
  return false
end try
"""


class TerminalType(Enum):
    """Supported terminal emulators."""
    ITERM = "iterm"
    TERMINAL = "terminal"


class TerminalAdapter(ABC):
    """Opens and closes titled terminal windows for worktrees."""

    name: str = ""
    bundle_id: str = ""

    def __init__(self, runner: Optional[ProcessRunner] = None):
        self.runner = runner or ProcessRunner()

    def run_script(self, script: str) -> CommandResult:
        """Run an AppleScript through osascript."""
        return self.runner.run("osascript", ["-e", script])

    def is_available(self) -> bool:
        """Check if this terminal is installed; a failed probe means unavailable."""
        result = self.run_script(_FINDER_PROBE.format(bundle_id=self.bundle_id))
        return result.ok and result.stdout.strip() == "true"

    @abstractmethod
    def open_window(self, frames: Sequence[TerminalFrame], window_title: str) -> bool:
        """Open a window titled window_title with up to two panes.

        Returns:
            True if the automation script succeeded (or there was nothing to open)
        """

    @abstractmethod
    def close_by_title(self, title: str) -> bool:
        """Close the first window/tab whose title contains title.

        Returns:
            True if a window was found and closed
        """

    def _report_failure(self, result: CommandResult) -> None:
        logger.error(f"{self.name} AppleScript failed (exit {result.exit_code}): {result.stderr.strip()}")
