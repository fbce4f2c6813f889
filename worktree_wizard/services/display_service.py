"""Display and formatting service for worktrees and issues"""
from typing import List, Optional

from rich.console import Console
from rich.table import Table

from worktree_wizard.constants import (
    ISSUE_COLUMNS,
    LOCKED_WORKTREE_STYLE,
    MAIN_WORKTREE_STYLE,
    PRUNABLE_WORKTREE_STYLE,
    WORKTREE_COLUMNS,
)
from worktree_wizard.models.issue import Issue
from worktree_wizard.models.worktree import Worktree

console = Console()


def format_worktree_status(worktree: Worktree) -> str:
    """Status text for a worktree row."""
    if worktree.is_prunable:
        return "prunable"
    if worktree.is_locked:
        return f"locked ({worktree.lock_reason})" if worktree.lock_reason else "locked"
    return "active"


def get_worktree_style(worktree: Worktree) -> Optional[str]:
    if worktree.is_prunable:
        return PRUNABLE_WORKTREE_STYLE
    if worktree.is_locked:
        return LOCKED_WORKTREE_STYLE
    if worktree.is_main:
        return MAIN_WORKTREE_STYLE
    return None


class DisplayService:
    def __init__(self, verbose: bool = False, debug: bool = False):
        self.verbose = verbose
        self.debug_mode = debug

    def display_worktree_table(self, worktrees: List[Worktree]) -> None:
        """Display a table of worktrees."""
        if not worktrees:
            console.print("[yellow]No worktrees found[/yellow]")
            return

        table = Table()
        for col in WORKTREE_COLUMNS:
            table.add_column(col.label, max_width=col.width or None)

        for worktree in worktrees:
            issue = f"#{worktree.issue_number}" if worktree.issue_number is not None else ""
            branch = f"{worktree.branch} (main)" if worktree.is_main else worktree.branch
            table.add_row(
                branch,
                issue,
                format_worktree_status(worktree),
                worktree.path,
                style=get_worktree_style(worktree),
            )

        console.print(table)
        if self.verbose:
            console.print(f"[dim]{len(worktrees)} worktree(s)[/dim]")

    def display_issue_table(self, issues: List[Issue], worktrees: Optional[List[Worktree]] = None) -> None:
        """Display a table of open issues, marking ones that already have a worktree."""
        if not issues:
            console.print("[yellow]No open issues[/yellow]")
            return

        in_progress = {wt.issue_number for wt in worktrees or [] if wt.issue_number is not None}

        table = Table()
        for col in ISSUE_COLUMNS:
            table.add_column(col.label, max_width=col.width or None)

        for issue in issues:
            table.add_row(
                str(issue.number),
                issue.title,
                ", ".join(label.name for label in issue.labels),
                ", ".join(issue.assignees),
                style="green" if issue.number in in_progress else None,
            )

        console.print(table)
