"""Terminal adapters and the factory that picks one."""

from typing import List, Optional, Union

from worktree_wizard.exceptions import UnsupportedTerminalError
from worktree_wizard.utils.process import ProcessRunner

from .base import TerminalAdapter, TerminalType
from .escaping import escape_for_applescript, escape_for_shell, shell_quote
from .frames import (
    TerminalFrame,
    build_frames,
    build_issue_prompt,
    get_custom_tab_title,
    get_tab_title,
)
from .iterm import ITermAdapter
from .terminal_app import TerminalAppAdapter


def get_terminal_adapter(
    terminal_type: Union[TerminalType, str], runner: Optional[ProcessRunner] = None
) -> TerminalAdapter:
    """Get the adapter for a terminal type.

    Raises:
        UnsupportedTerminalError: For any value outside TerminalType
    """
    try:
        kind = TerminalType(terminal_type)
    except ValueError:
        raise UnsupportedTerminalError(str(terminal_type)) from None

    if kind is TerminalType.ITERM:
        return ITermAdapter(runner)
    if kind is TerminalType.TERMINAL:
        return TerminalAppAdapter(runner)
    raise UnsupportedTerminalError(kind.value)


def get_available_adapters(runner: Optional[ProcessRunner] = None) -> List[TerminalAdapter]:
    """Get every known adapter whose terminal is installed."""
    adapters = [get_terminal_adapter(kind, runner) for kind in TerminalType]
    return [adapter for adapter in adapters if adapter.is_available()]


__all__ = [
    "TerminalAdapter",
    "TerminalType",
    "TerminalFrame",
    "ITermAdapter",
    "TerminalAppAdapter",
    "get_terminal_adapter",
    "get_available_adapters",
    "build_frames",
    "build_issue_prompt",
    "get_tab_title",
    "get_custom_tab_title",
    "escape_for_applescript",
    "escape_for_shell",
    "shell_quote",
]
