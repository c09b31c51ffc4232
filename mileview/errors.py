"""Error types raised while building the overview page."""

from typing import Optional


class MileviewError(Exception):
    """Base class for failures of a refresh cycle."""


class TransportError(MileviewError):
    """Network or HTTP failure talking to the GitHub API."""

    def __init__(self, message: str, url: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class DecodeError(MileviewError):
    """Malformed API response."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url


class TemplateError(MileviewError):
    """Page template could not be loaded or rendered."""
