"""Fetch milestones and their issues and aggregate them for rendering."""

import logging
from typing import Iterable, List, Optional

from mileview.github.client import GitHubClient
from mileview.github.models import AggregatedMilestone, Issue, Milestone
from mileview.trace.schema import EventType
from mileview.trace.store_jsonl import JsonlTraceStore

logger = logging.getLogger(__name__)


def filter_milestones(
    milestones: Iterable[Milestone],
    include_due: bool = True,
    include_nondue: bool = False,
) -> List[Milestone]:
    """Keep milestones according to whether they carry a due date.

    Args:
        milestones: Milestones in API order.
        include_due: Keep milestones that have a due date.
        include_nondue: Keep milestones without a due date.

    Returns:
        Retained milestones, original order preserved.
    """
    return [
        m
        for m in milestones
        if (m.has_due_date and include_due) or (not m.has_due_date and include_nondue)
    ]


def normalize_body(body: str) -> str:
    """Convert CRLF line endings to LF."""
    return body.replace("\r\n", "\n")


def sort_by_title(items):
    """Stable ascending sort on the ``title`` attribute."""
    return sorted(items, key=lambda item: item.title)


def _owned_issues(milestone: Milestone, issues: List[Issue]) -> List[Issue]:
    owned = []
    for issue in issues:
        if issue.milestone_number != milestone.number:
            logger.warning(
                "dropping issue #%d: listed under milestone %d but belongs to %s",
                issue.number,
                milestone.number,
                issue.milestone_number,
            )
            continue
        owned.append(issue.model_copy(update={"body": normalize_body(issue.body)}))
    return owned


def aggregate_milestones(
    client: GitHubClient,
    repo: str,
    include_due: bool = True,
    include_nondue: bool = False,
    trace_store: Optional[JsonlTraceStore] = None,
) -> List[AggregatedMilestone]:
    """Fetch milestones, attach their issues and order them by title.

    Args:
        client: GitHub client instance.
        repo: Repository in format "owner/repo".
        include_due: Keep milestones that have a due date.
        include_nondue: Keep milestones without a due date.
        trace_store: Optional trace store for fetch events.

    Returns:
        Aggregated milestones sorted by title.

    Raises:
        TransportError, DecodeError: From any fetch; nothing partial is returned.
    """
    if trace_store:
        trace_store.emit(EventType.API_CALL, {"endpoint": "milestones", "repo": repo})
    milestones = client.list_milestones(repo, sort="due_date", direction="asc")
    retained = filter_milestones(milestones, include_due=include_due, include_nondue=include_nondue)
    logger.debug("kept %d of %d milestones for %s", len(retained), len(milestones), repo)

    aggregated = []
    for milestone in retained:
        if trace_store:
            trace_store.emit(
                EventType.API_CALL,
                {"endpoint": "issues", "repo": repo, "milestone": milestone.number},
            )
        issues = _owned_issues(milestone, client.list_issues(repo, milestone.number))
        aggregated.append(AggregatedMilestone.from_milestone(milestone, sort_by_title(issues)))

    aggregated = sort_by_title(aggregated)

    if trace_store:
        trace_store.emit(
            EventType.OBSERVATION,
            {
                "repo": repo,
                "milestones_total": len(milestones),
                "milestones_kept": len(aggregated),
                "issue_count": sum(len(m.issues) for m in aggregated),
            },
        )
    return aggregated
