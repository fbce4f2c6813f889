"""Worktree data models."""

from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Optional

from worktree_wizard.constants import MAIN_BRANCH_NAMES
from worktree_wizard.utils.slug import extract_issue_number


class MergeStatus(Enum):
    """Result of checking a branch against a base branch."""
    MERGED = "merged"
    UNMERGED = "unmerged"
    MISSING = "missing"  # Branch ref does not exist
    UNKNOWN = "unknown"  # Merged branches could not be listed


class CreatedWorktree(NamedTuple):
    """Location and branch of a freshly added worktree."""
    path: str
    branch: str


@dataclass(frozen=True)
class Worktree:
    """One working directory of the repository, as reported by git."""

    path: str
    branch: str  # "detached" when not on a branch
    commit: str = ""
    is_main: bool = False  # Branch is main or master
    issue_number: Optional[int] = None
    is_locked: bool = False
    lock_reason: Optional[str] = None
    is_prunable: bool = False  # Directory missing?

    @classmethod
    def from_fields(
        cls,
        path: str,
        branch: str,
        commit: str = "",
        is_locked: bool = False,
        lock_reason: Optional[str] = None,
        is_prunable: bool = False,
    ) -> "Worktree":
        """Build a Worktree, deriving is_main and issue_number from the branch."""
        is_main = branch in MAIN_BRANCH_NAMES
        return cls(
            path=path,
            branch=branch,
            commit=commit,
            is_main=is_main,
            issue_number=None if is_main else extract_issue_number(branch),
            is_locked=is_locked,
            lock_reason=lock_reason,
            is_prunable=is_prunable,
        )

    def __str__(self) -> str:
        """String representation of worktree."""
        if self.is_prunable:
            status = "prunable"
        elif self.is_locked:
            status = "locked"
        else:
            status = "active"
        main_marker = " (main)" if self.is_main else ""
        return f"{self.branch} @ {self.path}{main_marker} [{status}]"
