"""Refresh pipeline: fetch, aggregate and render the overview page."""

import logging
import time
from typing import Optional

from mileview.config import Settings
from mileview.errors import MileviewError
from mileview.github.client import GitHubClient
from mileview.github.fetch import aggregate_milestones
from mileview.report.render_html import HtmlRenderer
from mileview.trace.schema import EventType
from mileview.trace.store_jsonl import JsonlTraceStore

logger = logging.getLogger(__name__)


def generate_overview(
    settings: Settings,
    client: GitHubClient,
    renderer: HtmlRenderer,
    trace_store: Optional[JsonlTraceStore] = None,
) -> bytes:
    """Run one full refresh cycle.

    Args:
        settings: Repository and milestone filter settings.
        client: GitHub client instance.
        renderer: Page renderer.
        trace_store: Optional trace store for refresh events.

    Returns:
        The rendered page.

    Raises:
        MileviewError: Any fetch, decode or template failure.
    """
    started = time.monotonic()
    if trace_store:
        trace_store.emit(
            EventType.REFRESH_START,
            {
                "repo": settings.repo,
                "include_due": settings.include_due,
                "include_nondue": settings.include_nondue,
            },
        )

    try:
        milestones = aggregate_milestones(
            client,
            settings.repo,
            include_due=settings.include_due,
            include_nondue=settings.include_nondue,
            trace_store=trace_store,
        )
        page = renderer.render(settings.repo, milestones)
    except MileviewError as e:
        if trace_store:
            trace_store.emit(EventType.ERROR, {"error": type(e).__name__, "message": str(e)})
        raise

    elapsed = time.monotonic() - started
    issue_count = sum(len(m.issues) for m in milestones)
    logger.info(
        "rendered %s: %d milestones, %d issues in %.2fs",
        settings.repo,
        len(milestones),
        issue_count,
        elapsed,
    )
    if trace_store:
        trace_store.emit(EventType.RENDER, {"template": renderer.templates_dir.as_posix(), "bytes": len(page)})
        trace_store.emit(EventType.REFRESH_DONE, {"elapsed_s": round(elapsed, 3), "issue_count": issue_count})
    return page
