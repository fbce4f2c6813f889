"""Command-line argument parsing for worktree-wizard."""

import argparse
from typing import List, Optional

from worktree_wizard.__version__ import __version__
from worktree_wizard.services.terminal import TerminalType


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="ww",
        description="Create and remove git worktrees for GitHub issues, with terminal automation",
        epilog="Requires git, the GitHub CLI (gh) for issue commands, and osascript for terminals.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show verbose output")
    parser.add_argument("--version", action="version", version=f"worktree-wizard {__version__}")
    parser.add_argument(
        "--debug", action="store_true", help="Show debug information for troubleshooting"
    )
    parser.add_argument(
        "--terminal",
        choices=[kind.value for kind in TerminalType],
        default=TerminalType.ITERM.value,
        help="Terminal to open worktrees in (default: iterm)",
    )
    parser.add_argument(
        "--setup",
        action="append",
        metavar="CMD",
        help="Setup command to run in new worktrees (repeatable; default: npm install)",
    )
    parser.add_argument("--no-setup", action="store_true", help="Skip setup commands")
    parser.add_argument("--frame1", metavar="CMD", default="npm run dev", help="Command for the first pane")
    parser.add_argument("--frame2", metavar="CMD", default="claude", help="Command for the second pane")
    parser.add_argument("--no-frame1", action="store_true", help="Do not open the first pane")
    parser.add_argument("--no-frame2", action="store_true", help="Do not open the second pane")
    parser.add_argument("--ai-command", default="claude", help="AI command used with --context")
    parser.add_argument("--base-branch", help="Branch new worktrees start from (default: detected)")
    parser.add_argument("--no-issues", action="store_true", help="Disable GitHub issue integration")

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    subparsers.add_parser("list", help="List worktrees")
    subparsers.add_parser("issues", help="List open GitHub issues")

    summon = subparsers.add_parser("summon", help="Create a worktree for an issue")
    summon.add_argument("issue", type=int, help="Issue number")
    summon.add_argument(
        "--context", action="store_true", help="Start the second pane with an AI prompt for the issue"
    )

    new = subparsers.add_parser("new", help="Create a worktree on a custom branch")
    new.add_argument("branch", help="Branch name")

    banish = subparsers.add_parser("banish", help="Remove a worktree and its merged branch")
    banish.add_argument("target", help="Worktree path or branch name")
    banish.add_argument("-y", "--yes", action="store_true", help="Do not ask about uncommitted changes")

    lock = subparsers.add_parser("lock", help="Lock a worktree")
    lock.add_argument("target", help="Worktree path or branch name")
    lock.add_argument("--reason", help="Why the worktree is locked")

    unlock = subparsers.add_parser("unlock", help="Unlock a worktree")
    unlock.add_argument("target", help="Worktree path or branch name")

    repair = subparsers.add_parser("repair", help="Repair worktree administrative files")
    repair.add_argument("path", nargs="?", help="Worktree to repair (default: all)")

    subparsers.add_parser("prune", help="Prune stale worktree metadata")
    subparsers.add_parser("doctor", help="Check required tools and terminals")

    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    return build_parser().parse_args(argv)
