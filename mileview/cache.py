"""Single-document cache in front of the refresh pipeline."""

import logging
import threading
import time
from datetime import timedelta
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class OverviewCache:
    """Holds the last rendered page and refreshes it lazily once it is stale.

    One lock guards the whole read-or-refresh step, so refreshes never run
    concurrently and callers never see a buffer that is being replaced.
    Callers arriving during a refresh block until it finishes.
    """

    def __init__(
        self,
        lifetime: timedelta,
        refresh: Callable[[], bytes],
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize an empty cache.

        Args:
            lifetime: How long a rendered page stays fresh.
            refresh: Produces a complete new page; errors propagate.
            clock: Monotonic seconds source.
        """
        self.lifetime = lifetime
        self._refresh = refresh
        self._clock = clock
        self._lock = threading.Lock()
        self.data = b""
        self.updated: Optional[float] = None

    def is_stale(self) -> bool:
        """True if never populated or at least ``lifetime`` old."""
        if self.updated is None:
            return True
        return self._clock() - self.updated >= self.lifetime.total_seconds()

    def get(self) -> bytes:
        """Return the cached page, refreshing it first if stale."""
        with self._lock:
            if self.is_stale():
                started = self._clock()
                data = self._refresh()
                # Buffer and timestamp change together, only after a full render.
                self.data, self.updated = data, self._clock()
                logger.info("cache refreshed in %.2fs (%d bytes)", self.updated - started, len(data))
            return self.data
