"""Summon and banish workflows for worktree-wizard"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional

from worktree_wizard.config import Config
from worktree_wizard.constants import DETACHED_BRANCH
from worktree_wizard.exceptions import WorktreeWizardError
from worktree_wizard.logging_config import get_logger
from worktree_wizard.models.issue import Issue
from worktree_wizard.models.worktree import CreatedWorktree, MergeStatus, Worktree
from worktree_wizard.services.git.repo_context import RepoContext
from worktree_wizard.services.git.worktrees import WorktreeRepository
from worktree_wizard.services.github_service import GitHubService
from worktree_wizard.services.setup_service import SetupProgress, SetupService
from worktree_wizard.services.terminal import (
    TerminalAdapter,
    build_frames,
    build_issue_prompt,
    get_custom_tab_title,
    get_tab_title,
    get_terminal_adapter,
)
from worktree_wizard.utils.process import ProcessRunner

logger = get_logger(__name__)

# on_progress(message, current, total); current/total only for setup commands
WorkflowProgress = Callable[[str, Optional[int], Optional[int]], None]


class WorkflowStep(Enum):
    """Steps of the summon and banish workflows."""
    CREATE = "create"
    ASSIGN = "assign"
    SETUP = "setup"
    TERMINAL = "terminal"
    CHECK_CHANGES = "check_changes"
    CLOSE_TERMINAL = "close_terminal"
    REMOVE = "remove"
    BRANCH_CLEANUP = "branch_cleanup"


class BanishOutcome(Enum):
    """What happened to a banished worktree's branch."""
    REMOVED = "removed"
    BRANCH_DELETED = "branch_deleted"
    BRANCH_KEPT = "branch_kept"
    BRANCH_KEPT_UNMERGED = "branch_kept_unmerged"

    @property
    def message(self) -> str:
        return {
            BanishOutcome.REMOVED: "Worktree removed",
            BanishOutcome.BRANCH_DELETED: "Worktree removed, branch deleted",
            BanishOutcome.BRANCH_KEPT: "Worktree removed, branch kept",
            BanishOutcome.BRANCH_KEPT_UNMERGED: "Worktree removed, branch kept (unmerged)",
        }[self]


@dataclass
class SummonResult:
    """Outcome of a summon workflow."""
    success: bool
    path: Optional[str] = None
    branch: Optional[str] = None
    failed_step: Optional[WorkflowStep] = None
    error: Optional[str] = None
    issue_assigned: bool = False

    @property
    def message(self) -> str:
        if self.success:
            return f"Created at {self.path}"
        step = self.failed_step.value if self.failed_step else "unknown"
        return f"Summon failed at step '{step}': {self.error}"


@dataclass
class BanishResult:
    """Outcome of a banish workflow."""
    success: bool
    path: str
    branch: str
    outcome: Optional[BanishOutcome] = None
    had_uncommitted_changes: bool = False
    terminal_closed: bool = False
    failed_step: Optional[WorkflowStep] = None
    error: Optional[str] = None

    @property
    def message(self) -> str:
        if self.success and self.outcome:
            return self.outcome.message
        step = self.failed_step.value if self.failed_step else "unknown"
        return f"Banish failed at step '{step}': {self.error}"


class WorktreeOrchestrator:
    """Runs the multi-step worktree workflows.

    This is the only layer that decides whether a failure aborts a workflow
    or is logged and skipped. Steps are not transactional: a failure leaves
    the effects of earlier steps in place and names the step that failed.
    """

    def __init__(
        self,
        config: Config,
        repository: WorktreeRepository,
        issues: GitHubService,
        setup: SetupService,
        terminal: Optional[TerminalAdapter] = None,
    ):
        """Initialize the orchestrator.

        Args:
            config: Immutable settings for this run
            repository: Worktree and branch operations
            issues: Issue tracker access
            setup: Post-create setup runner
            terminal: Terminal adapter; resolved from config.terminal_type when omitted
        """
        self.config = config
        self.repository = repository
        self.issues = issues
        self.setup = setup
        self._terminal = terminal

    @classmethod
    def from_config(
        cls, config: Config, context: RepoContext, runner: Optional[ProcessRunner] = None
    ) -> "WorktreeOrchestrator":
        """Wire up the default services for a repository."""
        runner = runner or ProcessRunner(timeout=config.command_timeout)
        return cls(
            config=config,
            repository=WorktreeRepository(context, runner),
            issues=GitHubService(context, runner),
            setup=SetupService(runner, timeout=config.setup_timeout),
            terminal=None,
        )

    @property
    def terminal(self) -> TerminalAdapter:
        """The configured terminal adapter.

        Raises:
            UnsupportedTerminalError: If config.terminal_type is unknown
        """
        if self._terminal is None:
            self._terminal = get_terminal_adapter(self.config.terminal_type, self.repository.runner)
        return self._terminal

    @staticmethod
    def _notify(on_progress: Optional[WorkflowProgress], message: str,
                current: Optional[int] = None, total: Optional[int] = None) -> None:
        logger.debug(message)
        if on_progress:
            on_progress(message, current, total)

    def _base_branch(self, base_branch: Optional[str]) -> str:
        return base_branch or self.config.base_branch or self.repository.get_default_branch()

    # Read side

    def list_worktrees(self) -> List[Worktree]:
        return self.repository.list()

    def list_issues(self) -> List[Issue]:
        """Open issues, or nothing when issue integration is disabled."""
        if not self.config.github_issues_enabled:
            return []
        return self.issues.list_open()

    def find_worktree(self, target: str) -> Optional[Worktree]:
        """Find a worktree by path or branch name."""
        resolved = str(Path(target).expanduser().resolve())
        for worktree in self.repository.list():
            if worktree.branch == target or worktree.path == target:
                return worktree
            if str(Path(worktree.path).resolve()) == resolved:
                return worktree
        return None

    # Summon

    def summon_issue(
        self,
        issue: Issue,
        pass_context: bool = False,
        base_branch: Optional[str] = None,
        on_progress: Optional[WorkflowProgress] = None,
    ) -> SummonResult:
        """Create a worktree for an issue, assign it, set it up and open a terminal.

        Args:
            issue: Issue the worktree is for
            pass_context: Start the second pane with an AI prompt about the issue
            base_branch: Branch to start from (default branch when None)
            on_progress: Receives a message per step
        """
        self._notify(on_progress, f"Creating worktree for #{issue.number}...")
        try:
            created = self.repository.create(issue.number, issue.title, self._base_branch(base_branch))
        except WorktreeWizardError as e:
            logger.error(f"Could not create worktree for #{issue.number}: {e}")
            return SummonResult(False, failed_step=WorkflowStep.CREATE, error=str(e))

        assigned = False
        if self.config.github_issues_enabled:
            self._notify(on_progress, "Assigning issue...")
            assigned = self._assign(issue.number)

        frame2_command = None
        if pass_context:
            frame2_command = build_issue_prompt(self.config.default_ai_command, issue.number, issue.title)

        result = self._finish_summon(
            created, get_tab_title(issue.number, issue.title), frame2_command, on_progress
        )
        result.issue_assigned = assigned
        return result

    def summon_custom(
        self,
        branch_name: str,
        base_branch: Optional[str] = None,
        on_progress: Optional[WorkflowProgress] = None,
    ) -> SummonResult:
        """Create a worktree on a free-form branch, set it up and open a terminal."""
        branch_name = branch_name.strip()
        if not branch_name:
            return SummonResult(False, failed_step=WorkflowStep.CREATE, error="Branch name cannot be empty")

        self._notify(on_progress, "Creating worktree...")
        try:
            created = self.repository.create_custom(branch_name, self._base_branch(base_branch))
        except WorktreeWizardError as e:
            logger.error(f"Could not create worktree for {branch_name}: {e}")
            return SummonResult(False, failed_step=WorkflowStep.CREATE, error=str(e))

        return self._finish_summon(created, get_custom_tab_title(created.branch), None, on_progress)

    def _assign(self, issue_number: int) -> bool:
        """Assign the issue to the current user; failures never abort summon."""
        try:
            self.issues.assign_to_self(issue_number)
            return True
        except WorktreeWizardError as e:
            logger.warning(f"Could not assign issue #{issue_number}: {e}")
            return False

    def _finish_summon(
        self,
        created: CreatedWorktree,
        tab_title: str,
        frame2_command: Optional[str],
        on_progress: Optional[WorkflowProgress],
    ) -> SummonResult:
        """Run setup and open the terminal for a freshly created worktree."""
        path, branch = created

        commands = self.config.setup_commands
        if commands:
            def forward(progress: SetupProgress) -> None:
                self._notify(on_progress, progress.step, progress.current, progress.total)

            try:
                self.setup.run(path, commands, forward)
            except WorktreeWizardError as e:
                logger.error(f"Setup failed in {path}; the worktree was left in place")
                return SummonResult(False, path, branch, WorkflowStep.SETUP, str(e))

        frames = build_frames(path, self.config.frame1, self.config.frame2, frame2_command)
        if frames:
            self._notify(on_progress, "Opening terminal...")
            try:
                opened = self.terminal.open_window(frames, tab_title)
            except WorktreeWizardError as e:
                return SummonResult(False, path, branch, WorkflowStep.TERMINAL, str(e))
            if not opened:
                return SummonResult(
                    False, path, branch, WorkflowStep.TERMINAL,
                    f"Could not open a {self.terminal.name} window for {path}",
                )

        logger.info(f"Summoned {branch} at {path}")
        return SummonResult(True, path, branch)

    # Banish

    def banish(
        self,
        worktree: Worktree,
        issue: Optional[Issue] = None,
        base_branch: Optional[str] = None,
        on_progress: Optional[WorkflowProgress] = None,
    ) -> BanishResult:
        """Close the worktree's terminal, remove it and clean up a merged branch.

        Uncommitted changes are discarded; callers warn or confirm beforehand
        (see WorktreeRepository.has_uncommitted_changes).

        Args:
            worktree: Worktree to remove
            issue: Issue the worktree belongs to, used to find its terminal title
            base_branch: Branch to check merges against (default branch when None)
            on_progress: Receives a message per step
        """
        result = BanishResult(success=False, path=worktree.path, branch=worktree.branch)

        self._notify(on_progress, "Checking for changes...")
        result.had_uncommitted_changes = self.repository.has_uncommitted_changes(worktree.path)
        if result.had_uncommitted_changes:
            self._notify(on_progress, "Warning: uncommitted changes")

        self._notify(on_progress, "Closing terminal...")
        result.terminal_closed = self._close_terminal(worktree, issue)

        self._notify(on_progress, "Removing worktree...")
        try:
            self.repository.remove(worktree.path)
        except WorktreeWizardError as e:
            logger.error(f"Could not remove worktree at {worktree.path}: {e}")
            result.failed_step = WorkflowStep.REMOVE
            result.error = str(e)
            return result

        result.success = True
        if not worktree.branch or worktree.branch == DETACHED_BRANCH:
            result.outcome = BanishOutcome.REMOVED
            return result

        self._notify(on_progress, "Checking merge status...")
        result.outcome = self._clean_up_branch(worktree.branch, self._base_branch(base_branch))
        logger.info(f"Banished {worktree.path}: {result.outcome.message}")
        return result

    def _close_terminal(self, worktree: Worktree, issue: Optional[Issue]) -> bool:
        """Close the worktree's terminal window; failures never abort banish."""
        if issue is not None:
            title = get_tab_title(issue.number, issue.title)
        else:
            title = get_custom_tab_title(worktree.branch)
        try:
            closed = self.terminal.close_by_title(title)
        except WorktreeWizardError as e:
            logger.warning(f"Could not close terminal '{title}': {e}")
            return False
        if not closed:
            logger.debug(f"No terminal window titled '{title}'")
        return closed

    def _clean_up_branch(self, branch: str, base_branch: str) -> BanishOutcome:
        """Delete the branch if it is merged into base_branch."""
        status = self.repository.merge_status(branch, base_branch)
        if status is MergeStatus.UNKNOWN:
            logger.warning(f"Could not check whether {branch} is merged into {base_branch}; keeping it")
        if status is not MergeStatus.MERGED:
            return BanishOutcome.BRANCH_KEPT_UNMERGED

        try:
            self.repository.delete_branch(branch)
        except WorktreeWizardError as e:
            logger.warning(f"Could not delete merged branch {branch}: {e}")
            return BanishOutcome.BRANCH_KEPT
        return BanishOutcome.BRANCH_DELETED

    # Lock / unlock

    def lock(self, worktree: Worktree, reason: Optional[str] = None) -> None:
        """Lock a worktree.

        Raises:
            GitOperationError: With git's message cleaned for display
        """
        self.repository.lock(worktree.path, reason)

    def unlock(self, worktree: Worktree) -> None:
        """Unlock a worktree.

        Raises:
            GitOperationError: With git's message cleaned for display
        """
        self.repository.unlock(worktree.path)
