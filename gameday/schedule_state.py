"""Single-slot schedule state shared by the API, with request fencing."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field

from gameday.ingestion.schedule import group_games_by_date, sort_games
from gameday.ingestion.schema import GameRecord

logger = logging.getLogger(__name__)
LOAD_ERROR_MESSAGE = "Failed to load games data"


@dataclass(frozen=True)
class ScheduleSnapshot:
    week: int | None = None
    year: int | None = None
    loading: bool = False
    error: str | None = None
    games: list[GameRecord] = field(default_factory=list)
    days: dict[str, list[GameRecord]] = field(default_factory=dict)
    request_id: int = 0

    @property
    def status(self) -> str:
        if self.request_id == 0:
            return "idle"
        if self.loading:
            return "loading"
        if self.error is not None:
            return "error"
        return "loaded"


class ScheduleBoard:
    """Holds the latest schedule result.

    Every fetch cycle takes a request id from :meth:`begin`. Results are only
    applied when their id is still the newest one issued, so a slow response
    for a week the user already moved away from is dropped instead of
    overwriting the newer selection.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._issued = 0
        self._snapshot = ScheduleSnapshot()

    @property
    def latest_request_id(self) -> int:
        with self._lock:
            return self._issued

    def snapshot(self) -> ScheduleSnapshot:
        with self._lock:
            return self._snapshot

    def begin(self, week: int, year: int | None = None) -> int:
        with self._lock:
            self._issued += 1
            self._snapshot = ScheduleSnapshot(
                week=week,
                year=year,
                loading=True,
                request_id=self._issued,
            )
            return self._issued

    def complete(self, request_id: int, games: list[GameRecord]) -> bool:
        sorted_games = sort_games(games)
        days = group_games_by_date(sorted_games)
        with self._lock:
            if request_id != self._issued:
                logger.info(
                    "Discarding stale schedule result request_id=%s latest=%s",
                    request_id,
                    self._issued,
                )
                return False
            current = self._snapshot
            self._snapshot = ScheduleSnapshot(
                week=current.week,
                year=current.year,
                loading=False,
                error=None,
                games=sorted_games,
                days=days,
                request_id=request_id,
            )
            return True

    def fail(self, request_id: int, message: str = LOAD_ERROR_MESSAGE) -> bool:
        with self._lock:
            if request_id != self._issued:
                logger.info(
                    "Discarding stale schedule error request_id=%s latest=%s",
                    request_id,
                    self._issued,
                )
                return False
            current = self._snapshot
            self._snapshot = ScheduleSnapshot(
                week=current.week,
                year=current.year,
                loading=False,
                error=message,
                request_id=request_id,
            )
            return True

    def find_game(self, game_id: str) -> GameRecord | None:
        for game in self.snapshot().games:
            if game.id == game_id:
                return game
        return None
