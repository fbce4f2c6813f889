"""Worktree operations service for worktree-wizard."""

import re
from enum import Enum
from typing import Dict, List, Optional

from worktree_wizard.constants import DEFAULT_BASE_BRANCH, DETACHED_BRANCH
from worktree_wizard.exceptions import CommandError, GitOperationError
from worktree_wizard.logging_config import get_logger
from worktree_wizard.models.worktree import CreatedWorktree, MergeStatus, Worktree
from worktree_wizard.services.git.repo_context import RepoContext
from worktree_wizard.utils.process import ProcessRunner
from worktree_wizard.utils.slug import create_branch_name

logger = get_logger(__name__)

_FATAL_PREFIX = re.compile(r"^fatal:\s*", re.IGNORECASE)

ALREADY_LOCKED_MESSAGE = "Worktree is already locked"
NOT_LOCKED_MESSAGE = "Worktree is not locked"


class _ParserState(Enum):
    IDLE = "idle"
    ACCUMULATING = "accumulating"


def _emit(record: Dict[str, object], worktrees: List[Worktree]) -> None:
    """Validate a finished record and append it if it has a path and a branch."""
    path = record.get("path")
    branch = record.get("branch")
    if not path or not branch:
        logger.debug(f"Dropping incomplete worktree record: {record}")
        return
    worktrees.append(
        Worktree.from_fields(
            path=str(path),
            branch=str(branch),
            commit=str(record.get("HEAD", "")),
            is_locked=bool(record.get("locked", False)),
            lock_reason=record.get("lock_reason"),  # type: ignore[arg-type]
            is_prunable=bool(record.get("prunable", False)),
        )
    )


def parse_worktree_porcelain(output: str) -> List[Worktree]:
    """Parse ``git worktree list --porcelain`` output.

    Format (one record per worktree, separated by blank lines)::

        worktree /path/to/worktree
        HEAD <sha>
        branch refs/heads/<name>      (or: detached)
        locked [<reason>]
        prunable [<reason>]

    Records missing a path or a branch are dropped. A missing trailing blank
    line after the last record is tolerated.
    """
    worktrees: List[Worktree] = []
    state = _ParserState.IDLE
    current: Dict[str, object] = {}

    for raw_line in output.split("\n"):
        line = raw_line.strip()

        if not line:
            # Empty line marks end of worktree entry
            if state is _ParserState.ACCUMULATING:
                _emit(current, worktrees)
                current = {}
                state = _ParserState.IDLE
            continue

        if line.startswith("worktree "):
            if state is _ParserState.ACCUMULATING:
                # No blank separator before the next record
                _emit(current, worktrees)
            current = {"path": line[len("worktree "):]}
            state = _ParserState.ACCUMULATING
            continue

        if state is _ParserState.IDLE:
            # Field outside a record; its record has no path and is dropped
            continue

        if line.startswith("HEAD "):
            current["HEAD"] = line[len("HEAD "):]
        elif line.startswith("branch "):
            branch_ref = line[len("branch "):]
            if branch_ref.startswith("refs/heads/"):
                branch_ref = branch_ref[len("refs/heads/"):]
            current["branch"] = branch_ref
        elif line == "detached":
            current["branch"] = DETACHED_BRANCH
        elif line == "locked":
            current["locked"] = True
        elif line.startswith("locked "):
            current["locked"] = True
            current["lock_reason"] = line[len("locked "):]
        elif line == "prunable" or line.startswith("prunable "):
            current["prunable"] = True

    # Handle last entry if no trailing blank line
    if state is _ParserState.ACCUMULATING:
        _emit(current, worktrees)

    return worktrees


def clean_git_error(message: str) -> str:
    """Turn raw git stderr into a user-facing message.

    Strips a leading ``fatal:`` (any case) and surrounding whitespace, and
    maps the two lock/unlock conflicts to fixed sentences.
    """
    cleaned = _FATAL_PREFIX.sub("", message.strip(), count=1).strip()

    if "is already locked" in cleaned:
        return ALREADY_LOCKED_MESSAGE
    if "is not locked" in cleaned:
        return NOT_LOCKED_MESSAGE

    return cleaned


class WorktreeRepository:
    """Service for managing git worktrees and their branches."""

    def __init__(self, context: RepoContext, runner: Optional[ProcessRunner] = None):
        """Initialize the repository service.

        Args:
            context: Location of the main repository checkout
            runner: Command runner (a default ProcessRunner if omitted)
        """
        self.context = context
        self.runner = runner or ProcessRunner()

    @property
    def repo_root(self) -> str:
        return str(self.context.root)

    def _git(self, *args: str) -> str:
        """Run a git command in the repository root, raising CommandError on failure."""
        return self.runner.run_strict("git", list(args), cwd=self.repo_root)

    def _git_result(self, *args: str):
        """Run a git command in the repository root without raising."""
        return self.runner.run("git", list(args), cwd=self.repo_root)

    def list(self) -> List[Worktree]:
        """List all worktrees of the repository, main checkout first.

        Raises:
            CommandError: If git cannot list worktrees
        """
        output = self._git("worktree", "list", "--porcelain")
        worktrees = parse_worktree_porcelain(output)
        logger.debug(f"Found {len(worktrees)} worktrees")
        for wt in worktrees:
            logger.debug(f"  {wt}")
        return worktrees

    def create(
        self, issue_number: int, issue_title: str, base_branch: str = DEFAULT_BASE_BRANCH
    ) -> CreatedWorktree:
        """Create a worktree on a new ``issue-<n>-<slug>`` branch.

        Raises:
            CommandError: If the branch already exists or the base branch is invalid
        """
        return self.create_custom(create_branch_name(issue_number, issue_title), base_branch)

    def create_custom(
        self, branch_name: str, base_branch: str = DEFAULT_BASE_BRANCH
    ) -> CreatedWorktree:
        """Create a worktree on a new branch with a free-form name.

        Raises:
            CommandError: If the branch already exists or the base branch is invalid
        """
        worktree_path = self.context.worktree_path(branch_name)
        self._git("worktree", "add", "-b", branch_name, worktree_path, base_branch)
        logger.info(f"Created worktree at {worktree_path} on {branch_name} (from {base_branch})")
        return CreatedWorktree(path=worktree_path, branch=branch_name)

    def remove(self, path: str) -> None:
        """Force-remove a worktree, discarding its uncommitted changes."""
        self._git("worktree", "remove", path, "--force")
        logger.info(f"Removed worktree at {path}")

    def merge_status(self, branch: str, base_branch: str = DEFAULT_BASE_BRANCH) -> MergeStatus:
        """Check whether a branch is merged into base_branch."""
        # Verify the branch exists first so a typo doesn't read as "unmerged"
        if not self._git_result("rev-parse", "--verify", branch).ok:
            return MergeStatus.MISSING

        result = self._git_result("branch", "--merged", base_branch)
        if not result.ok:
            logger.debug(f"Could not list branches merged into {base_branch}: {result.stderr.strip()}")
            return MergeStatus.UNKNOWN

        merged = [name.strip().lstrip("*+").strip() for name in result.stdout.split("\n")]
        return MergeStatus.MERGED if branch in merged else MergeStatus.UNMERGED

    def is_branch_merged(self, branch: str, base_branch: str = DEFAULT_BASE_BRANCH) -> bool:
        """Check if a branch has been merged into base_branch.

        A missing branch, or a failure to list merged branches, reads as not merged.
        """
        return self.merge_status(branch, base_branch) is MergeStatus.MERGED

    def delete_branch(self, branch: str) -> None:
        """Delete a local branch; git refuses if it is unmerged."""
        self._git("branch", "-d", branch)
        logger.info(f"Deleted branch {branch}")

    def force_delete_branch(self, branch: str) -> None:
        """Delete a local branch even if it is unmerged."""
        self._git("branch", "-D", branch)
        logger.info(f"Force-deleted branch {branch}")

    def get_current_branch(self) -> str:
        """Get the branch checked out in the main worktree ("" when detached)."""
        return self._git("branch", "--show-current").strip()

    def get_default_branch(self) -> str:
        """Get the default branch, never failing.

        Tries origin's HEAD, then a local ``main``, then ``master``, and
        finally assumes ``main``.
        """
        result = self._git_result("symbolic-ref", "refs/remotes/origin/HEAD")
        if result.ok and result.stdout.strip():
            return result.stdout.strip().replace("refs/remotes/origin/", "", 1)

        for candidate in ("main", "master"):
            if self._git_result("rev-parse", "--verify", candidate).ok:
                return candidate

        logger.warning(
            f"Could not determine the default branch of {self.repo_root}; assuming '{DEFAULT_BASE_BRANCH}'"
        )
        return DEFAULT_BASE_BRANCH

    def has_uncommitted_changes(self, path: str) -> bool:
        """Check if there are uncommitted changes in a worktree."""
        result = self.runner.run("git", ["status", "--porcelain"], cwd=path)
        return bool(result.stdout.strip())

    def lock(self, path: str, reason: Optional[str] = None) -> None:
        """Lock a worktree so it is not pruned or moved.

        Raises:
            GitOperationError: With a cleaned message if git refuses
        """
        args = ["worktree", "lock", path]
        if reason:
            args.extend(["--reason", reason])
        try:
            self._git(*args)
        except CommandError as e:
            raise GitOperationError("lock", clean_git_error(str(e)), path) from e
        logger.info(f"Locked worktree at {path}")

    def unlock(self, path: str) -> None:
        """Unlock a worktree.

        Raises:
            GitOperationError: With a cleaned message if git refuses
        """
        try:
            self._git("worktree", "unlock", path)
        except CommandError as e:
            raise GitOperationError("unlock", clean_git_error(str(e)), path) from e
        logger.info(f"Unlocked worktree at {path}")

    def move(self, path: str, new_path: str) -> None:
        """Move a worktree to a new location."""
        self._git("worktree", "move", path, new_path)
        logger.info(f"Moved worktree {path} -> {new_path}")

    def repair(self, path: Optional[str] = None) -> None:
        """Repair worktree administrative files (all worktrees if no path given)."""
        args = ["worktree", "repair"]
        if path:
            args.append(path)
        self._git(*args)

    def prune(self) -> None:
        """Prune stale worktree metadata."""
        self._git("worktree", "prune")
        logger.info("Pruned stale worktree metadata")
