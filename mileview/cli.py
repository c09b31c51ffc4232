import argparse
import logging
import sys
from typing import List, Optional

from mileview.cache import OverviewCache
from mileview.config import (
    DEFAULT_API_URL,
    DEFAULT_CACHE_TIME,
    DEFAULT_LISTEN,
    DEFAULT_REPO,
    Settings,
    parse_duration,
    parse_listen,
)
from mileview.github.client import GitHubClient
from mileview.overview import generate_overview
from mileview.report.render_html import HtmlRenderer
from mileview.server import create_app
from mileview.trace.store_jsonl import JsonlTraceStore

logger = logging.getLogger(__name__)

_TRUE = {"1", "t", "true", "yes", "on"}
_FALSE = {"0", "f", "false", "no", "off"}


def _bool_value(text: str) -> bool:
    value = text.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise argparse.ArgumentTypeError(f"invalid boolean value: {text!r}")


def _duration_value(text: str):
    try:
        return parse_duration(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def _listen_value(text: str) -> str:
    try:
        parse_listen(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))
    return text


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="mileview: GitHub milestone overview server")
    parser.add_argument("--repo", default=DEFAULT_REPO, help="Repository name (owner/repo)")
    parser.add_argument("--listen", type=_listen_value, default=DEFAULT_LISTEN, help="Listen address")
    parser.add_argument(
        "--cache",
        type=_duration_value,
        default=DEFAULT_CACHE_TIME,
        help="Cache life time, e.g. 1h, 30m, 90s (default: 1h)",
    )
    # --due, --due=false and --due false are all accepted
    parser.add_argument(
        "--due",
        type=_bool_value,
        nargs="?",
        const=True,
        default=True,
        help="Include milestones with a due date (default: true)",
    )
    parser.add_argument(
        "--nondue",
        type=_bool_value,
        nargs="?",
        const=True,
        default=False,
        help="Include milestones without a due date (default: false)",
    )
    parser.add_argument("--api-url", default=DEFAULT_API_URL, help="GitHub API root")
    parser.add_argument("--templates", help="Directory holding index.html (default: bundled template)")
    parser.add_argument("--trace", help="Append refresh events to this JSONL file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def settings_from_args(args: argparse.Namespace) -> Settings:
    return Settings(
        repo=args.repo,
        listen=args.listen,
        cache_time=args.cache,
        include_due=args.due,
        include_nondue=args.nondue,
        api_url=args.api_url,
        templates_dir=args.templates,
        trace_path=args.trace,
    )


def build_cache(
    settings: Settings,
    client: Optional[GitHubClient] = None,
    trace_store: Optional[JsonlTraceStore] = None,
) -> OverviewCache:
    """Wire client, renderer and trace into a cache gate for ``settings``."""
    client = client or GitHubClient(base_url=settings.api_url)
    renderer = HtmlRenderer(settings.templates_dir)
    return OverviewCache(
        settings.cache_time,
        lambda: generate_overview(settings, client, renderer, trace_store),
    )


def main(argv: Optional[List[str]] = None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    settings = settings_from_args(args)
    trace_store = JsonlTraceStore(settings.trace_path) if settings.trace_path else None
    app = create_app(build_cache(settings, trace_store=trace_store))

    host, port = parse_listen(settings.listen)
    logger.info(
        "serving %s on %s:%d (cache %s, due=%s, nondue=%s)",
        settings.repo,
        host,
        port,
        settings.cache_time,
        settings.include_due,
        settings.include_nondue,
    )
    try:
        app.run(host=host, port=port, threaded=True)
    except OSError as e:
        logger.critical("cannot listen on %s: %s", settings.listen, e)
        sys.exit(1)
    finally:
        if trace_store:
            trace_store.close()


if __name__ == "__main__":
    main()
