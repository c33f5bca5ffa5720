"""Per-fetch-cycle log capture served by /api/logs.

Records logged while a week is loading are tagged with that cycle's request
id and week, so the API can show what happened to one particular selection
(including results that were discarded as stale).
"""

from __future__ import annotations

import logging
from collections import deque
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Iterator

_current_cycle: ContextVar[tuple[int, int] | None] = ContextVar(
    "gameday_fetch_cycle", default=None
)


@contextmanager
def fetch_cycle(request_id: int, week: int) -> Iterator[None]:
    """Tag every record logged in this context with *request_id* and *week*."""
    token = _current_cycle.set((request_id, week))
    try:
        yield
    finally:
        _current_cycle.reset(token)


class FetchCycleFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        cycle = _current_cycle.get()
        if not hasattr(record, "request_id"):
            record.request_id = cycle[0] if cycle else None
        if not hasattr(record, "week"):
            record.week = cycle[1] if cycle else None
        return True


@dataclass(frozen=True)
class CycleLogEntry:
    timestamp: str
    level: str
    logger: str
    message: str
    request_id: int | None
    week: int | None


class FetchCycleLog(logging.Handler):
    def __init__(self, maxlen: int = 200) -> None:
        super().__init__()
        self._records: deque[CycleLogEntry] = deque(maxlen=maxlen)
        self.addFilter(FetchCycleFilter())

    def emit(self, record: logging.LogRecord) -> None:
        try:
            created = datetime.fromtimestamp(record.created, tz=timezone.utc)
            self._records.append(
                CycleLogEntry(
                    timestamp=f"{created:%Y-%m-%d %H:%M:%S} UTC",
                    level=record.levelname,
                    logger=record.name,
                    message=self.format(record),
                    request_id=getattr(record, "request_id", None),
                    week=getattr(record, "week", None),
                )
            )
        except Exception:
            self.handleError(record)

    def entries(
        self,
        limit: int = 100,
        request_id: int | None = None,
        week: int | None = None,
    ) -> list[dict]:
        """Newest-first entries, optionally narrowed to one cycle or week."""
        if limit <= 0:
            return []
        matched = [
            entry
            for entry in reversed(self._records)
            if (request_id is None or entry.request_id == request_id)
            and (week is None or entry.week == week)
        ]
        return [asdict(entry) for entry in matched[:limit]]


_cycle_log: FetchCycleLog | None = None


def get_cycle_log() -> FetchCycleLog:
    global _cycle_log
    if _cycle_log is None:
        _cycle_log = FetchCycleLog()
        _cycle_log.setFormatter(logging.Formatter("%(message)s"))
        _cycle_log.setLevel(logging.DEBUG)
    return _cycle_log


def install_cycle_log() -> FetchCycleLog:
    """Attach the cycle log to the ``gameday`` logger tree."""
    handler = get_cycle_log()
    root = logging.getLogger("gameday")
    if handler not in root.handlers:
        root.addHandler(handler)
    root.setLevel(logging.DEBUG)
    return handler
