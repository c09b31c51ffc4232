"""Tests for flag parsing and configuration helpers."""

from datetime import timedelta
from pathlib import Path

import pytest

from mileview.cli import build_cache, build_parser, settings_from_args
from mileview.config import Settings, parse_duration, parse_listen
from mileview.github.models import Milestone
from tests.conftest import FakeClient


def _settings(*argv):
    return settings_from_args(build_parser().parse_args(list(argv)))


def test_defaults():
    settings = _settings()
    assert settings == Settings()
    assert settings.repo == "syncthing/syncthing"
    assert settings.listen == ":8080"
    assert settings.cache_time == timedelta(hours=1)
    assert settings.include_due is True
    assert settings.include_nondue is False
    assert settings.templates_dir is None
    assert settings.trace_path is None


def test_flags():
    settings = _settings(
        "--repo", "owner/name",
        "--listen", "127.0.0.1:9000",
        "--cache", "5m",
        "--due=false",
        "--nondue",
        "--templates", "/srv/tmpl",
        "--trace", "trace.jsonl",
    )
    assert settings.repo == "owner/name"
    assert settings.listen == "127.0.0.1:9000"
    assert settings.cache_time == timedelta(minutes=5)
    assert settings.include_due is False
    assert settings.include_nondue is True
    assert settings.templates_dir == Path("/srv/tmpl")
    assert settings.trace_path == Path("trace.jsonl")


def test_bool_flag_separate_value():
    settings = _settings("--due", "no", "--nondue", "true")
    assert settings.include_due is False
    assert settings.include_nondue is True


@pytest.mark.parametrize("argv", [["--cache", "soon"], ["--cache", "inf"], ["--listen", "8080"], ["--due=maybe"]])
def test_bad_flags_exit(argv):
    with pytest.raises(SystemExit) as exc_info:
        build_parser().parse_args(argv)
    assert exc_info.value.code == 2


@pytest.mark.parametrize(
    "text, expected",
    [
        ("1h", timedelta(hours=1)),
        ("1h30m", timedelta(hours=1, minutes=30)),
        ("90s", timedelta(seconds=90)),
        ("250ms", timedelta(milliseconds=250)),
        ("1.5h", timedelta(minutes=90)),
        ("0s", timedelta(0)),
        ("120", timedelta(seconds=120)),
    ],
)
def test_parse_duration(text, expected):
    assert parse_duration(text) == expected


@pytest.mark.parametrize("text", ["", "h", "1d", "1h 30m", "-5", "5x", "inf", "nan", "1e400", "1e300", "9999999999999999h"])
def test_parse_duration_rejects(text):
    with pytest.raises(ValueError):
        parse_duration(text)


@pytest.mark.parametrize(
    "text, expected",
    [
        (":8080", ("0.0.0.0", 8080)),
        ("localhost:80", ("localhost", 80)),
        ("[::1]:8443", ("::1", 8443)),
    ],
)
def test_parse_listen(text, expected):
    assert parse_listen(text) == expected


@pytest.mark.parametrize("text", ["8080", "host:", "host:http", ":70000"])
def test_parse_listen_rejects(text):
    with pytest.raises(ValueError):
        parse_listen(text)


def test_build_cache_wires_pipeline():
    settings = _settings("--nondue", "--due=false")
    client = FakeClient([Milestone(number=2, title="Backlog")])

    cache = build_cache(settings, client=client)
    page = cache.get()

    assert b"Backlog" in page
    assert client.calls[0] == ("milestones", "syncthing/syncthing", "due_date", "asc")
