"""GitHub issue integration through the gh CLI"""
import json
from typing import Any, List, Optional

from worktree_wizard.constants import ISSUE_JSON_FIELDS, ISSUE_LIST_LIMIT
from worktree_wizard.exceptions import CommandError, ParseError
from worktree_wizard.logging_config import get_logger
from worktree_wizard.models.issue import Issue
from worktree_wizard.services.git.repo_context import RepoContext
from worktree_wizard.utils.process import ProcessRunner

logger = get_logger(__name__)

# gh stderr fragments meaning "no such issue"
_NOT_FOUND_MARKERS = ("could not resolve to an issue",)


def _parse_json(text: str, context: str) -> Any:
    try:
        return json.loads(text)
    except ValueError as e:
        raise ParseError(context, str(e)) from e


def _to_issue(data: Any, context: str) -> Issue:
    try:
        return Issue.from_dict(data)
    except (KeyError, TypeError, ValueError) as e:
        raise ParseError(context, f"unexpected issue shape ({e})") from e


class GitHubService:
    """Lists, fetches and assigns GitHub issues via ``gh``."""

    def __init__(
        self,
        context: RepoContext,
        runner: Optional[ProcessRunner] = None,
        limit: int = ISSUE_LIST_LIMIT,
    ):
        self.context = context
        self.runner = runner or ProcessRunner()
        self.limit = limit

    def _gh(self, *args: str) -> str:
        return self.runner.run_strict("gh", list(args), cwd=str(self.context.root))

    def list_open(self) -> List[Issue]:
        """Fetch open issues from the repository.

        Raises:
            CommandError: If gh fails
            ParseError: If gh returns malformed JSON
        """
        stdout = self._gh(
            "issue", "list",
            "--state", "open",
            "--json", ISSUE_JSON_FIELDS,
            "--limit", str(self.limit),
        )
        if not stdout.strip():
            return []

        data = _parse_json(stdout, "GitHub issues")
        if not isinstance(data, list):
            raise ParseError("GitHub issues", "expected a JSON array")
        issues = [_to_issue(item, "GitHub issues") for item in data]
        logger.debug(f"[GitHub] Fetched {len(issues)} open issues")
        return issues

    def find(self, number: int) -> Optional[Issue]:
        """Fetch a single issue, distinguishing "not found" from failure.

        Returns:
            The issue, or None if the tracker says it does not exist

        Raises:
            CommandError: For any other gh failure (network, auth, ...)
            ParseError: If gh returns malformed JSON
        """
        context = f"GitHub issue #{number}"
        try:
            stdout = self._gh("issue", "view", str(number), "--json", ISSUE_JSON_FIELDS)
        except CommandError as e:
            if any(marker in str(e).lower() for marker in _NOT_FOUND_MARKERS):
                return None
            raise
        return _to_issue(_parse_json(stdout, context), context)

    def fetch(self, number: int) -> Optional[Issue]:
        """Fetch a single issue; any failure yields None."""
        try:
            return self.find(number)
        except (CommandError, ParseError) as e:
            logger.debug(f"[GitHub] Could not fetch issue #{number}: {e}")
            return None

    def assign_to_self(self, number: int) -> None:
        """Assign an issue to the authenticated user."""
        self._gh("issue", "edit", str(number), "--add-assignee", "@me")
        logger.info(f"[GitHub] Assigned issue #{number} to @me")

    def current_user(self) -> str:
        """Get the authenticated user's login."""
        return self.runner.run_strict("gh", ["api", "user", "-q", ".login"]).strip()

    def repo_full_name(self) -> str:
        """Get the repository as ``owner/name``."""
        return self._gh(
            "repo", "view", "--json", "nameWithOwner", "-q", ".nameWithOwner"
        ).strip()
