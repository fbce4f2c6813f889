"""Git-related services for worktree-wizard."""

from .repo_context import RepoContext, is_inside_git_repo, is_git_repo
from .worktrees import WorktreeRepository, parse_worktree_porcelain, clean_git_error

__all__ = [
    "RepoContext",
    "is_inside_git_repo",
    "is_git_repo",
    "WorktreeRepository",
    "parse_worktree_porcelain",
    "clean_git_error",
]
