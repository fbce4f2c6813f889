"""Data models for worktree-wizard."""

from .worktree import Worktree, CreatedWorktree, MergeStatus
from .issue import Issue, IssueLabel

__all__ = ["Worktree", "CreatedWorktree", "MergeStatus", "Issue", "IssueLabel"]
