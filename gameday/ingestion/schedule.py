"""Ordering and day grouping for extracted schedule games."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Iterable

from gameday.ingestion.schema import GameRecord

UNKNOWN_DATE_LABEL = "TBD"


def kickoff_at(game: GameRecord) -> datetime | None:
    """Parse ``date + "T" + time``; None when the pair is not ISO 8601."""
    if not game.date or not game.time:
        return None
    try:
        return datetime.fromisoformat(f"{game.date}T{game.time}")
    except ValueError:
        return None


def _sort_key(game: GameRecord) -> tuple[int, float]:
    kickoff = kickoff_at(game)
    if kickoff is None:
        return (1, 0.0)
    if kickoff.tzinfo is None:
        kickoff = kickoff.replace(tzinfo=timezone.utc)
    return (0, kickoff.timestamp())


def sort_games(games: Iterable[GameRecord]) -> list[GameRecord]:
    """Return games ordered by kickoff, earliest first.

    The sort is stable, so games sharing a kickoff keep their incoming order.
    Games whose date/time cannot be parsed go last, also in incoming order.
    """

    return sorted(games, key=_sort_key)


def _calendar_date(game: GameRecord) -> date | None:
    try:
        return date.fromisoformat(game.date[:10])
    except ValueError:
        return None


def date_label(game: GameRecord) -> str:
    day = _calendar_date(game)
    if day is None:
        return game.date or UNKNOWN_DATE_LABEL
    return f"{day:%B} {day.day}"


def group_games_by_date(games: Iterable[GameRecord]) -> dict[str, list[GameRecord]]:
    """Bucket games under "Month D" labels.

    Keys appear in first-occurrence order and buckets keep incoming order, so
    grouping a sorted list yields chronological sections. Dates from different
    years share a label; a single season never spans the same month twice.
    """

    grouped: dict[str, list[GameRecord]] = {}
    for game in games:
        grouped.setdefault(date_label(game), []).append(game)
    return grouped


def flatten_groups(grouped: dict[str, list[GameRecord]]) -> list[GameRecord]:
    return [game for bucket in grouped.values() for game in bucket]


def kickoff_display(game: GameRecord) -> str:
    kickoff = kickoff_at(game)
    if kickoff is None:
        return f"{game.date} {game.time}".strip() or UNKNOWN_DATE_LABEL
    display = f"{kickoff:%a}, {kickoff:%B} {kickoff.day}, {kickoff.year} {kickoff:%I:%M %p}"
    if kickoff.tzinfo is not None:
        display = f"{display} {kickoff.tzname()}"
    return display


def ticket_url(game: GameRecord) -> str | None:
    if game.tickets is None or not game.tickets.links:
        return None
    return game.tickets.links[0].href
