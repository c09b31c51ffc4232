"""GitHub integration for fetching milestone data."""

from mileview.github.client import GitHubClient
from mileview.github.fetch import aggregate_milestones, filter_milestones, normalize_body, sort_by_title
from mileview.github.models import AggregatedMilestone, Issue, Milestone

__all__ = [
    "GitHubClient",
    "Milestone",
    "Issue",
    "AggregatedMilestone",
    "aggregate_milestones",
    "filter_milestones",
    "normalize_body",
    "sort_by_title",
]
