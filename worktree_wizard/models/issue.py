"""Issue tracker data models"""
from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class IssueLabel:
    name: str
    color: str = ""


@dataclass(frozen=True)
class Issue:
    """An open work item from the issue tracker."""
    number: int
    title: str
    body: str = ""
    labels: List[IssueLabel] = field(default_factory=list)
    assignees: List[str] = field(default_factory=list)  # Login names
    state: str = "OPEN"
    url: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "Issue":
        """Build an Issue from the tracker's JSON shape.

        Raises:
            KeyError, TypeError, ValueError: If required fields are missing or malformed
        """
        return cls(
            number=int(data["number"]),
            title=str(data["title"]),
            body=data.get("body") or "",
            labels=[
                IssueLabel(name=label["name"], color=label.get("color", ""))
                for label in data.get("labels") or []
            ],
            assignees=[assignee["login"] for assignee in data.get("assignees") or []],
            state=data.get("state") or "",
            url=data.get("url") or "",
        )
