"""Pane and title helpers shared by the terminal adapters."""

from dataclasses import dataclass
from typing import List, Optional

from worktree_wizard.config import FrameConfig
from worktree_wizard.constants import CUSTOM_TAB_PREFIX, TAB_TITLE_ELLIPSIS, TAB_TITLE_MAX_LENGTH
from worktree_wizard.services.terminal.escaping import shell_quote


@dataclass(frozen=True)
class TerminalFrame:
    """One pane: a directory to cd into and an optional command to run."""
    directory: str
    command: Optional[str] = None


def build_frames(
    directory: str,
    frame1: FrameConfig,
    frame2: FrameConfig,
    frame2_command: Optional[str] = None,
) -> List[TerminalFrame]:
    """Build the panes for a worktree from the frame templates.

    Args:
        directory: Worktree path every pane starts in
        frame1: First pane template
        frame2: Second pane template
        frame2_command: Overrides the second pane's command when given

    Returns:
        Zero, one or two frames, in template order
    """
    frames: List[TerminalFrame] = []
    if frame1.enabled:
        frames.append(TerminalFrame(directory, frame1.command or None))
    if frame2.enabled:
        command = frame2_command if frame2_command is not None else frame2.command
        frames.append(TerminalFrame(directory, command or None))
    return frames


def _truncate(text: str) -> str:
    if len(text) > TAB_TITLE_MAX_LENGTH:
        return text[:TAB_TITLE_MAX_LENGTH] + TAB_TITLE_ELLIPSIS
    return text


def get_tab_title(issue_number: int, issue_title: str) -> str:
    """Tab title for an issue worktree, e.g. ``#42: Fix login``."""
    return f"#{issue_number}: {_truncate(issue_title)}"


def get_custom_tab_title(branch_name: str) -> str:
    """Tab title for a custom worktree, e.g. ``✧ spike-cache``."""
    return f"{CUSTOM_TAB_PREFIX}{_truncate(branch_name)}"


def build_issue_prompt(ai_command: str, issue_number: int, issue_title: str) -> str:
    """Build the AI command line that starts work on an issue."""
    prompt = (
        f"Work on GitHub issue #{issue_number}: {issue_title}. "
        f"You can use `gh issue view {issue_number}` to see full issue details."
    )
    return f"{ai_command} {shell_quote(prompt)}"
