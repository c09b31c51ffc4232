"""Records deserialized from GitHub milestone and issue payloads."""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class Milestone(BaseModel):
    """A milestone as returned by the milestones endpoint."""

    number: int = Field(..., description="Milestone number")
    title: str = Field(..., description="Milestone title")
    description: str = Field("", description="Milestone description")
    state: str = Field("open", description="open or closed")
    due_on: Optional[datetime] = Field(None, description="Due date, if any")
    open_issues: int = 0
    closed_issues: int = 0
    html_url: str = ""

    @field_validator("description", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        return value or ""

    @field_validator("due_on")
    @classmethod
    def _assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        # Date-only or offset-less values are taken as UTC.
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @property
    def has_due_date(self) -> bool:
        return self.due_on is not None


def _nested_names(items: Any, key: str, field: str) -> List[Any]:
    """Pull ``key`` out of each dict in a list of API sub-objects."""
    if items is None:
        return []
    if not isinstance(items, list):
        raise ValueError(f"{field} must be a list, got {type(items).__name__}")
    names = []
    for item in items:
        if isinstance(item, dict):
            if key not in item:
                raise ValueError(f"{field} entry without {key!r}: {item}")
            item = item[key]
        names.append(item)
    return names


class Issue(BaseModel):
    """An issue (or pull request) listed under a milestone."""

    number: int
    title: str
    body: str = ""
    state: str = "open"
    labels: List[str] = Field(default_factory=list)
    milestone_number: Optional[int] = None
    html_url: str = ""
    user: str = ""
    assignees: List[str] = Field(default_factory=list)
    is_pull_request: bool = False

    @model_validator(mode="before")
    @classmethod
    def _flatten(cls, data: Any) -> Any:
        """Flatten the nested API shape into plain fields."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        data["body"] = data.get("body") or ""
        data["labels"] = _nested_names(data.get("labels"), "name", "labels")
        milestone = data.pop("milestone", None)
        if isinstance(milestone, dict) and "milestone_number" not in data:
            data["milestone_number"] = milestone.get("number")
        user = data.get("user")
        if isinstance(user, dict):
            data["user"] = user.get("login", "")
        elif user is None:
            data["user"] = ""
        data["assignees"] = _nested_names(data.get("assignees"), "login", "assignees")
        if "pull_request" in data:
            data["is_pull_request"] = True
        return data


class AggregatedMilestone(Milestone):
    """A milestone together with its issues, ordered by title."""

    issues: List[Issue] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_ownership(self) -> "AggregatedMilestone":
        for issue in self.issues:
            if issue.milestone_number != self.number:
                raise ValueError(
                    f"issue #{issue.number} belongs to milestone {issue.milestone_number}, not {self.number}"
                )
        return self

    @classmethod
    def from_milestone(cls, milestone: Milestone, issues: List[Issue]) -> "AggregatedMilestone":
        data: Dict[str, Any] = milestone.model_dump()
        return cls(**data, issues=issues)
