"""JSONL trace store."""

import json
import logging
import sys
import threading
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, TextIO

from mileview.trace.schema import Event, EventType

if sys.platform != "win32":
    import fcntl
else:  # pragma: no cover
    fcntl = None

logger = logging.getLogger(__name__)


class JsonlTraceStore:
    """Append refresh events to a JSONL file, one event per line."""

    def __init__(self, path: Path):
        """Initialize trace store.

        Args:
            path: Path to JSONL file. Parent directories will be created if needed.
        """
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._file: Optional[TextIO] = None
        self._lock = threading.Lock()

    def _open(self) -> TextIO:
        if self._file is None:
            self._file = open(self.path, "a", encoding="utf-8")
        return self._file

    def append(self, event: Event) -> None:
        """Append an event, holding an exclusive file lock while writing."""
        line = json.dumps(event.model_dump(), ensure_ascii=False, default=str)
        with self._lock:
            f = self._open()
            if fcntl is not None:
                fcntl.flock(f.fileno(), fcntl.LOCK_EX)
            try:
                f.write(line + "\n")
                f.flush()
            finally:
                if fcntl is not None:
                    fcntl.flock(f.fileno(), fcntl.LOCK_UN)

    def emit(self, event_type: EventType, payload: Dict[str, Any]) -> Event:
        """Create a timestamped event and append it."""
        event = Event(type=event_type, payload=payload)
        self.append(event)
        return event

    def iter_events(self) -> Iterator[Event]:
        """Iterate over all events in the store.

        Yields:
            Event objects from the trace file. Malformed lines are skipped.
        """
        if not self.path.exists():
            return

        with open(self.path, "r", encoding="utf-8") as f:
            for lineno, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue
                try:
                    yield Event(**json.loads(line))
                except ValueError:
                    logger.warning("skipping malformed trace line %d in %s", lineno, self.path)

    def close(self) -> None:
        """Close the trace file."""
        with self._lock:
            if self._file is not None:
                self._file.close()
                self._file = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def load_events(path: Path) -> List[Event]:
    """Load all events from a trace file."""
    with JsonlTraceStore(path) as store:
        return list(store.iter_events())
