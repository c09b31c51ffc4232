"""Configuration utilities."""

import math
import re
from datetime import timedelta
from pathlib import Path
from typing import Optional, Tuple

from pydantic import BaseModel, Field

DEFAULT_REPO = "syncthing/syncthing"
DEFAULT_LISTEN = ":8080"
DEFAULT_CACHE_TIME = timedelta(hours=1)
DEFAULT_API_URL = "https://api.github.com"

_DURATION_UNITS = {
    "ns": timedelta(microseconds=0.001),
    "us": timedelta(microseconds=1),
    "µs": timedelta(microseconds=1),
    "ms": timedelta(milliseconds=1),
    "s": timedelta(seconds=1),
    "m": timedelta(minutes=1),
    "h": timedelta(hours=1),
}
_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")


class Settings(BaseModel):
    """Runtime settings for one dashboard process."""

    repo: str = Field(DEFAULT_REPO, description="Repository in format owner/repo")
    listen: str = Field(DEFAULT_LISTEN, description="Listen address host:port")
    cache_time: timedelta = Field(DEFAULT_CACHE_TIME, description="Cache life time")
    include_due: bool = Field(True, description="Include milestones with a due date")
    include_nondue: bool = Field(False, description="Include milestones without a due date")
    api_url: str = Field(DEFAULT_API_URL, description="GitHub API root")
    templates_dir: Optional[Path] = Field(None, description="Directory holding index.html")
    trace_path: Optional[Path] = Field(None, description="JSONL refresh trace file")


def parse_duration(text: str) -> timedelta:
    """Parse a duration such as "1h", "1h30m", "90s", "250ms" or bare seconds.

    Args:
        text: Duration string.

    Returns:
        Parsed duration.

    Raises:
        ValueError: If the string is not a valid non-negative duration.
    """
    text = text.strip()
    if not text:
        raise ValueError("empty duration")
    try:
        seconds = float(text)
    except ValueError:
        pass
    else:
        if not math.isfinite(seconds) or seconds < 0:
            raise ValueError(f"invalid duration: {text!r}")
        try:
            return timedelta(seconds=seconds)
        except OverflowError:
            raise ValueError(f"duration out of range: {text!r}")

    total = timedelta()
    pos = 0
    for match in _DURATION_PART.finditer(text):
        if match.start() != pos:
            break
        try:
            total += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        except OverflowError:
            raise ValueError(f"duration out of range: {text!r}")
        pos = match.end()
    if pos != len(text):
        raise ValueError(f"invalid duration: {text!r}")
    return total


def parse_listen(text: str) -> Tuple[str, int]:
    """Split a listen address into host and port.

    An empty host (":8080") binds all interfaces.

    Raises:
        ValueError: If the port is missing or out of range.
    """
    host, sep, port_text = text.rpartition(":")
    if not sep or not port_text.isdigit():
        raise ValueError(f"invalid listen address: {text!r}")
    port = int(port_text)
    if port > 65535:
        raise ValueError(f"port out of range: {port}")
    host = host.strip("[]") or "0.0.0.0"
    return host, port


def get_templates_dir() -> Path:
    """Get the directory of the bundled page template."""
    return Path(__file__).resolve().parent / "templates"
