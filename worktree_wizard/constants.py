"""Shared constants for worktree-wizard."""

from dataclasses import dataclass
from typing import List


# Subprocess timeouts (seconds)
DEFAULT_COMMAND_TIMEOUT = 30.0
DEFAULT_SETUP_TIMEOUT = 600.0
TIMEOUT_EXIT_CODE = 124

# Branch naming
ISSUE_BRANCH_PREFIX = "issue-"
SLUG_MAX_LENGTH = 50
MAIN_BRANCH_NAMES = ("main", "master")
DETACHED_BRANCH = "detached"
DEFAULT_BASE_BRANCH = "main"

# Terminal titles
TAB_TITLE_MAX_LENGTH = 30
TAB_TITLE_ELLIPSIS = "..."
CUSTOM_TAB_PREFIX = "✧ "

# Issue tracker
ISSUE_JSON_FIELDS = "number,title,body,labels,assignees,state,url"
ISSUE_LIST_LIMIT = 50

# Probes for the setup heuristic, checked in order
SETUP_MARKERS = ("node_modules", "vendor")

# External tools the CLI depends on
REQUIRED_TOOLS = ["git", "gh", "osascript"]


@dataclass
class ColumnDefinition:
    """Definition of a table column."""

    key: str
    label: str
    width: int = 0  # 0 means auto-width


WORKTREE_COLUMNS: List[ColumnDefinition] = [
    ColumnDefinition("branch", "Branch", 40),
    ColumnDefinition("issue", "Issue", 8),
    ColumnDefinition("status", "Status", 20),
    ColumnDefinition("path", "Path"),
]

ISSUE_COLUMNS: List[ColumnDefinition] = [
    ColumnDefinition("number", "#", 6),
    ColumnDefinition("title", "Title", 50),
    ColumnDefinition("labels", "Labels", 20),
    ColumnDefinition("assignees", "Assignees", 20),
]

# CLI colors (Rich color names)
MAIN_WORKTREE_STYLE = "cyan"
LOCKED_WORKTREE_STYLE = "yellow"
PRUNABLE_WORKTREE_STYLE = "red"
