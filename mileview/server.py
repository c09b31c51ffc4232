"""Flask application serving the cached overview page."""

import logging
import os
from typing import Callable

from flask import Flask, Response

from mileview.cache import OverviewCache
from mileview.errors import MileviewError

logger = logging.getLogger(__name__)

CONTENT_TYPE = "text/html; charset=utf-8"
# Every method and every path gets the same page.
ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def exit_process(exc: BaseException) -> None:
    """Log a failed refresh and terminate the whole process."""
    logger.critical("refresh failed, exiting: %s", exc)
    logging.shutdown()
    # sys.exit would only end the request thread.
    os._exit(1)


def create_app(cache: OverviewCache, on_fatal: Callable[[BaseException], None] = exit_process) -> Flask:
    """Build the single-route application.

    Args:
        cache: Cache gate holding the rendered page.
        on_fatal: Called with any refresh error before it propagates.
    """
    app = Flask(__name__)

    @app.route("/", methods=ALL_METHODS, provide_automatic_options=False)
    @app.route("/<path:_subpath>", methods=ALL_METHODS, provide_automatic_options=False)
    def overview(_subpath: str = "") -> Response:
        try:
            body = cache.get()
        except MileviewError as e:
            on_fatal(e)
            raise
        except Exception as e:
            logger.exception("unexpected error during refresh")
            on_fatal(e)
            raise
        return Response(body, status=200, content_type=CONTENT_TYPE)

    return app
