"""Command-line entry point for worktree-wizard"""

import argparse
import sys
from typing import List, Optional

from rich.console import Console
from rich.prompt import Confirm

from worktree_wizard.cli.args import parse_args
from worktree_wizard.config import Config, FrameConfig
from worktree_wizard.constants import REQUIRED_TOOLS
from worktree_wizard.core.orchestrator import WorktreeOrchestrator
from worktree_wizard.exceptions import WorktreeWizardError
from worktree_wizard.logging_config import setup_logging, get_logger
from worktree_wizard.models.worktree import Worktree
from worktree_wizard.services.display_service import DisplayService
from worktree_wizard.services.git.repo_context import RepoContext
from worktree_wizard.services.terminal import get_available_adapters
from worktree_wizard.utils.process import ProcessRunner

console = Console()
logger = get_logger(__name__)


def build_config(args: argparse.Namespace, repository_path: str = "") -> Config:
    """Build the run's Config from parsed arguments."""
    if args.no_setup:
        setup_commands = None
    elif args.setup:
        setup_commands = args.setup
    else:
        setup_commands = ["npm install"]

    return Config(
        repository_path=repository_path,
        terminal_type=args.terminal,
        frame1=FrameConfig(not args.no_frame1, args.frame1),
        frame2=FrameConfig(not args.no_frame2, args.frame2),
        default_ai_command=args.ai_command,
        setup_commands=setup_commands,
        github_issues_enabled=not args.no_issues,
        base_branch=args.base_branch,
        verbose=args.verbose,
        debug=args.debug,
    )


def _require_worktree(orchestrator: WorktreeOrchestrator, target: str) -> Worktree:
    worktree = orchestrator.find_worktree(target)
    if worktree is None:
        raise WorktreeWizardError(f"No worktree matches '{target}'")
    return worktree


def _progress_printer(status):
    """Adapt a rich status spinner to the orchestrator's progress callback."""
    def on_progress(message: str, current: Optional[int] = None, total: Optional[int] = None) -> None:
        if current is not None and total is not None:
            message = f"[{current}/{total}] {message}"
        status.update(message)
        logger.info(message)
    return on_progress


def run_command(args: argparse.Namespace, orchestrator: WorktreeOrchestrator) -> int:
    """Dispatch a parsed subcommand; returns the exit code."""
    display = DisplayService(verbose=args.verbose, debug=args.debug)

    if args.command == "list":
        display.display_worktree_table(orchestrator.list_worktrees())
        return 0

    if args.command == "issues":
        if not orchestrator.config.github_issues_enabled:
            console.print("[blue]ℹ GitHub issue integration is disabled[/blue]")
            return 0
        display.display_issue_table(orchestrator.list_issues(), orchestrator.list_worktrees())
        return 0

    if args.command == "summon":
        issue = orchestrator.issues.find(args.issue)
        if issue is None:
            raise WorktreeWizardError(f"Issue #{args.issue} not found")
        with console.status("Creating worktree...") as status:
            result = orchestrator.summon_issue(
                issue, pass_context=args.context, on_progress=_progress_printer(status)
            )
        if result.success and orchestrator.config.github_issues_enabled and not result.issue_assigned:
            console.print(f"[yellow]Could not assign #{issue.number} to you[/yellow]")
        return _report_summon(result)

    if args.command == "new":
        with console.status("Creating worktree...") as status:
            result = orchestrator.summon_custom(args.branch, on_progress=_progress_printer(status))
        return _report_summon(result)

    if args.command == "banish":
        worktree = _require_worktree(orchestrator, args.target)
        if not args.yes and orchestrator.repository.has_uncommitted_changes(worktree.path):
            console.print(f"[yellow]{worktree.path} has uncommitted changes that will be lost.[/yellow]")
            if not Confirm.ask("Remove it anyway?", default=False):
                console.print("[yellow]Operation cancelled[/yellow]")
                return 1
        issue = None
        if worktree.issue_number is not None and orchestrator.config.github_issues_enabled:
            issue = orchestrator.issues.fetch(worktree.issue_number)
        with console.status("Removing worktree...") as status:
            banished = orchestrator.banish(worktree, issue, on_progress=_progress_printer(status))
        if not banished.success:
            console.print(f"[red]Error: {banished.message}[/red]")
            return 1
        console.print(f"[green]{banished.message}[/green]")
        return 0

    if args.command == "lock":
        orchestrator.lock(_require_worktree(orchestrator, args.target), args.reason)
        console.print("[green]Worktree has been locked[/green]")
        return 0

    if args.command == "unlock":
        orchestrator.unlock(_require_worktree(orchestrator, args.target))
        console.print("[green]Worktree has been unlocked[/green]")
        return 0

    if args.command == "repair":
        orchestrator.repository.repair(args.path)
        console.print("[green]Worktrees repaired[/green]")
        return 0

    if args.command == "prune":
        orchestrator.repository.prune()
        console.print("[green]Stale worktree metadata pruned[/green]")
        return 0

    raise WorktreeWizardError(f"Unknown command: {args.command}")


def _report_summon(result) -> int:
    if result.success:
        console.print(f"[green]{result.message}[/green]")
        return 0
    console.print(f"[red]Error: {result.message}[/red]")
    if result.path:
        console.print(f"[yellow]The worktree was left at {result.path}[/yellow]")
    return 1


def _doctor(runner: ProcessRunner) -> int:
    availability = runner.check_availability(REQUIRED_TOOLS)
    for name in availability.available:
        console.print(f"[green]✓[/green] {name}")
    for name in availability.missing:
        console.print(f"[red]✗[/red] {name}")
    terminals = get_available_adapters(runner)
    if terminals:
        console.print("Terminals: " + ", ".join(adapter.name for adapter in terminals))
    else:
        console.print("[yellow]No supported terminal found[/yellow]")
    return 0 if not availability.missing else 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the application."""
    parsed_args = None
    try:
        parsed_args = parse_args(argv)
        setup_logging(verbose=parsed_args.verbose, debug=parsed_args.debug)

        runner = ProcessRunner()
        if parsed_args.command == "doctor":
            return _doctor(runner)

        context = RepoContext.discover(runner)
        config = build_config(parsed_args, str(context.root))

        if parsed_args.debug:
            console.print("[yellow]Configuration:[/yellow]")
            for key, value in config.to_dict().items():
                console.print(f"  {key}: {value}")

        runner.timeout = config.command_timeout
        orchestrator = WorktreeOrchestrator.from_config(config, context, runner)
        return run_command(parsed_args, orchestrator)
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        return 1
    except (WorktreeWizardError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        if parsed_args is not None and parsed_args.debug:
            console.print_exception()
        return 1


if __name__ == "__main__":
    sys.exit(main())
