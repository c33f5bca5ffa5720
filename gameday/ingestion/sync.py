"""Run schedule fetch cycles: fetch, extract, sort and group one week."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from gameday.ingestion.espn_client import (
    FetchFailedError,
    fetch_schedule,
    validate_week,
)
from gameday.ingestion.espn_parser import (
    ScheduleShapeError,
    count_raw_games,
    extract_games,
)
from gameday.ingestion.schedule import group_games_by_date, sort_games
from gameday.ingestion.schema import GameRecord
from gameday.log_buffer import fetch_cycle
from gameday.schedule_state import LOAD_ERROR_MESSAGE, ScheduleBoard
from gameday.settings import get_settings

logger = logging.getLogger(__name__)


@dataclass
class LoadResult:
    request_id: int
    week: int
    raw_games: int = 0
    games: int = 0
    skipped: int = 0
    applied: bool = False
    error: str | None = None


@dataclass
class WeekSchedule:
    week: int
    year: int
    games: list[GameRecord] = field(default_factory=list)
    days: dict[str, list[GameRecord]] = field(default_factory=dict)
    skipped: int = 0


def build_week_schedule(week: int, year: int | None = None) -> WeekSchedule:
    """Fetch and shape one week without touching shared state.

    FetchFailedError and ScheduleShapeError propagate to the caller.
    """

    season_year = year if year is not None else get_settings().season_year
    payload = fetch_schedule(week, season_year)
    raw_count = count_raw_games(payload)
    games = sort_games(extract_games(payload))
    return WeekSchedule(
        week=week,
        year=season_year,
        games=games,
        days=group_games_by_date(games),
        skipped=raw_count - len(games),
    )


def _run_cycle(
    board: ScheduleBoard, result: LoadResult, season_year: int
) -> LoadResult:
    week, request_id = result.week, result.request_id
    try:
        payload = fetch_schedule(week, season_year)
    except FetchFailedError as exc:
        logger.error("Fetch failed week=%s request_id=%s error=%s", week, request_id, exc)
        result.error = LOAD_ERROR_MESSAGE
        result.applied = board.fail(request_id, LOAD_ERROR_MESSAGE)
        return result

    try:
        result.raw_games = count_raw_games(payload)
        games = extract_games(payload)
    except ScheduleShapeError as exc:
        logger.error(
            "Unexpected schedule shape week=%s request_id=%s error=%s",
            week,
            request_id,
            exc,
        )
        result.error = LOAD_ERROR_MESSAGE
        result.applied = board.fail(request_id, LOAD_ERROR_MESSAGE)
        return result

    result.games = len(games)
    result.skipped = result.raw_games - result.games
    result.applied = board.complete(request_id, games)
    logger.info(
        "Loaded schedule week=%s request_id=%s games=%s skipped=%s applied=%s",
        week,
        request_id,
        result.games,
        result.skipped,
        result.applied,
    )
    return result


def load_week(board: ScheduleBoard, week: int, year: int | None = None) -> LoadResult:
    """Run one fetch cycle for *week* and publish the outcome on *board*.

    Unexpected errors still move the board out of ``loading`` before they
    propagate.
    """

    validate_week(week)
    season_year = year if year is not None else get_settings().season_year
    request_id = board.begin(week, season_year)
    result = LoadResult(request_id=request_id, week=week)

    with fetch_cycle(request_id, week):
        logger.info(
            "Loading schedule week=%s year=%s request_id=%s",
            week,
            season_year,
            request_id,
        )
        try:
            return _run_cycle(board, result, season_year)
        except Exception:
            logger.exception(
                "Schedule load crashed week=%s request_id=%s", week, request_id
            )
            board.fail(request_id, LOAD_ERROR_MESSAGE)
            raise
