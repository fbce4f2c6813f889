"""Utility functions for worktree-wizard.

This package provides utility modules:
- slug: Branch naming helpers
- process: External command execution
"""

from .slug import slugify, create_branch_name, extract_issue_number
from .process import ProcessRunner, CommandResult, Availability

__all__ = [
    # Branch naming
    "slugify",
    "create_branch_name",
    "extract_issue_number",
    # Processes
    "ProcessRunner",
    "CommandResult",
    "Availability",
]
