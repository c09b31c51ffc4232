"""GitHub API client."""

import logging
import os
from typing import Any, Dict, List, Optional, Type, TypeVar

import requests
from pydantic import BaseModel, ValidationError

from mileview.errors import DecodeError, TransportError
from mileview.github.models import Issue, Milestone

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class GitHubClient:
    """Lightweight GitHub API client for milestone and issue listings.

    Failures are raised immediately; there is no retry or rate-limit handling.
    """

    BASE_URL = "https://api.github.com"

    def __init__(
        self,
        token: Optional[str] = None,
        base_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ):
        """Initialize GitHub client.

        Args:
            token: GitHub personal access token. If None, reads from GITHUB_TOKEN env var.
            base_url: API root. Defaults to BASE_URL.
            session: Session to send requests through. A new one is created if None.
        """
        self.token = token or os.getenv("GITHUB_TOKEN")
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.session = session or requests.Session()
        if self.token:
            self.session.headers.update({"Authorization": f"token {self.token}"})
        self.session.headers.update({"Accept": "application/vnd.github.v3+json"})

    def _get(self, url: str, params: Optional[Dict[str, Any]] = None) -> requests.Response:
        """Issue a single GET request.

        Raises:
            TransportError: On connection failure or a non-2xx status.
        """
        logger.debug("GET %s params=%s", url, params)
        try:
            response = self.session.get(url, params=params)
            response.raise_for_status()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise TransportError(f"GET {url} failed with status {status}", url=url, status_code=status) from e
        except requests.RequestException as e:
            raise TransportError(f"GET {url} failed: {e}", url=url) from e
        return response

    def _get_paginated(self, url: str, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Fetch every page of a list endpoint, following rel="next" links.

        Raises:
            TransportError: On any failed page.
            DecodeError: If a page is not a JSON list.
        """
        items: List[Dict[str, Any]] = []
        next_url: Optional[str] = url
        next_params: Optional[Dict[str, Any]] = params
        while next_url:
            response = self._get(next_url, next_params)
            try:
                page = response.json()
            except ValueError as e:
                raise DecodeError(f"invalid JSON from {next_url}: {e}", url=next_url) from e
            if not isinstance(page, list):
                raise DecodeError(f"expected a JSON list from {next_url}, got {type(page).__name__}", url=next_url)
            items.extend(page)
            # The next link already carries the query string.
            next_url = response.links.get("next", {}).get("url")
            next_params = None
        return items

    def _parse(self, model: Type[T], items: List[Dict[str, Any]], url: str) -> List[T]:
        try:
            return [model.model_validate(item) for item in items]
        except ValidationError as e:
            raise DecodeError(f"unexpected {model.__name__} payload from {url}: {e}", url=url) from e

    def list_milestones(self, repo: str, sort: str = "due_date", direction: str = "asc") -> List[Milestone]:
        """Get milestones for a repository.

        Args:
            repo: Repository in format "owner/repo".
            sort: Sort field understood by the API.
            direction: "asc" or "desc".

        Returns:
            List of milestones, in API order.
        """
        url = f"{self.base_url}/repos/{repo}/milestones"
        items = self._get_paginated(url, {"sort": sort, "direction": direction})
        return self._parse(Milestone, items, url)

    def list_issues(self, repo: str, milestone_number: int) -> List[Issue]:
        """Get issues belonging to one milestone.

        Args:
            repo: Repository in format "owner/repo".
            milestone_number: Milestone number.

        Returns:
            List of issues, in API order.
        """
        url = f"{self.base_url}/repos/{repo}/issues"
        items = self._get_paginated(url, {"milestone": str(milestone_number)})
        return self._parse(Issue, items, url)
