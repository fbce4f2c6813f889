"""Repository location, resolved once and passed to every service."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from worktree_wizard.exceptions import CommandError, RepositoryNotFoundError
from worktree_wizard.logging_config import get_logger
from worktree_wizard.utils.process import ProcessRunner

logger = get_logger(__name__)


@dataclass(frozen=True)
class RepoContext:
    """Root of the main repository checkout."""

    root: Path

    @classmethod
    def discover(cls, runner: ProcessRunner, cwd: Optional[str] = None) -> "RepoContext":
        """Find the repository containing ``cwd`` (or the current directory).

        Raises:
            RepositoryNotFoundError: If ``cwd`` is not inside a git repository
        """
        try:
            root = runner.run_strict("git", ["rev-parse", "--show-toplevel"], cwd=cwd)
        except CommandError as e:
            raise RepositoryNotFoundError(cwd or str(Path.cwd()), str(e)) from e
        context = cls(Path(root.strip()))
        logger.debug(f"Repository root: {context.root}")
        return context

    @property
    def name(self) -> str:
        return self.root.name

    @property
    def parent_dir(self) -> Path:
        """Directory new worktrees are created in."""
        return self.root.parent

    def worktree_path(self, branch_name: str) -> str:
        """Sibling directory for a branch, e.g. ``../myrepo-issue-42-fix``."""
        return str(self.parent_dir / f"{self.name}-{branch_name}")


def is_inside_git_repo(runner: ProcessRunner, cwd: Optional[str] = None) -> bool:
    """Check if ``cwd`` (or the current directory) is inside a git repository."""
    return runner.run("git", ["rev-parse", "--git-dir"], cwd=cwd).ok


def is_git_repo(runner: ProcessRunner, path: str) -> bool:
    """Check if a path is a valid git repository."""
    return runner.run("git", ["-C", path, "rev-parse", "--git-dir"]).ok
