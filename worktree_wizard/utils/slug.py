"""Branch naming helpers."""

import re
from typing import Optional

from worktree_wizard.constants import ISSUE_BRANCH_PREFIX, SLUG_MAX_LENGTH

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_ISSUE_BRANCH = re.compile(rf"^{ISSUE_BRANCH_PREFIX}([0-9]+)")


def slugify(text: str) -> str:
    """Convert text to a lower-case, hyphen-delimited slug.

    Anything outside ``[a-z0-9]`` (accented letters included) collapses into
    a single hyphen. The result never starts or ends with a hyphen and is at
    most 50 characters long.
    """
    slug = _NON_ALNUM.sub("-", text.lower()).strip("-")
    # Truncation can expose a trailing hyphen
    return slug[:SLUG_MAX_LENGTH].rstrip("-")


def create_branch_name(issue_number: int, title: str) -> str:
    """Create a branch name like ``issue-42-add-feature``."""
    return f"{ISSUE_BRANCH_PREFIX}{issue_number}-{slugify(title)}"


def extract_issue_number(branch_name: str) -> Optional[int]:
    """Extract the issue number from a branch name like ``issue-42-some-feature``.

    Only matches at the start of the name; ``ISSUE-42`` and ``fix-issue-42``
    return None.
    """
    match = _ISSUE_BRANCH.match(branch_name)
    return int(match.group(1)) if match else None
