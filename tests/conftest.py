"""Shared fixtures."""

import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from mileview.github.models import Issue, Milestone

FIXTURES = Path(__file__).parent / "fixtures"


def load_fixture(name):
    with open(FIXTURES / name, "r", encoding="utf-8") as f:
        return json.load(f)


def make_response(payload, next_url=None, status_code=200):
    """Mock requests.Response carrying a JSON payload and an optional next link."""
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = payload
    response.links = {"next": {"url": next_url, "rel": "next"}} if next_url else {}
    response.raise_for_status.return_value = None
    return response


class FakeClient:
    """In-memory stand-in for GitHubClient."""

    def __init__(self, milestones, issues_by_milestone=None):
        self.milestones = milestones
        self.issues_by_milestone = issues_by_milestone or {}
        self.calls = []

    def list_milestones(self, repo, sort="due_date", direction="asc"):
        self.calls.append(("milestones", repo, sort, direction))
        return list(self.milestones)

    def list_issues(self, repo, milestone_number):
        self.calls.append(("issues", repo, milestone_number))
        result = self.issues_by_milestone.get(milestone_number, [])
        if isinstance(result, Exception):
            raise result
        return list(result)


@pytest.fixture
def milestone_payload():
    return load_fixture("milestones.json")


@pytest.fixture
def issue_payload():
    return load_fixture("issues_v1.json")


@pytest.fixture
def fake_client(milestone_payload, issue_payload):
    milestones = [Milestone.model_validate(m) for m in milestone_payload]
    issues = [Issue.model_validate(i) for i in issue_payload]
    return FakeClient(milestones, {1: issues})
