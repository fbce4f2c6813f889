"""Services used by the worktree workflows."""
