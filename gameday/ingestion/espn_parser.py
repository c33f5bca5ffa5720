"""Parser for ESPN weekly schedule payloads."""

from __future__ import annotations

import logging
from typing import Any

from gameday.ingestion.schema import GameRecord, TicketInfo, TicketLink

logger = logging.getLogger(__name__)


class ScheduleShapeError(ValueError):
    pass


class MalformedRecordError(ValueError):
    pass


def _safe_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return ""


def _get_dict(container: dict[str, Any], key: str) -> dict[str, Any]:
    value = container.get(key)
    return value if isinstance(value, dict) else {}


def _schedule_days(payload: Any) -> list[dict[str, Any]]:
    if not isinstance(payload, dict):
        raise ScheduleShapeError("schedule payload must be an object")
    content = payload.get("content")
    if not isinstance(content, dict):
        raise ScheduleShapeError("schedule payload is missing 'content'")
    schedule = content.get("schedule")
    if not isinstance(schedule, dict):
        raise ScheduleShapeError("schedule payload is missing 'content.schedule'")

    days: list[dict[str, Any]] = []
    for key, day in schedule.items():
        if not isinstance(day, dict) or not isinstance(day.get("games"), list):
            raise ScheduleShapeError(f"schedule day {key!r} has no 'games' list")
        days.append(day)
    return days


def _parse_tickets(competition: dict[str, Any]) -> TicketInfo | None:
    tickets = competition.get("tickets")
    if not isinstance(tickets, list) or not tickets:
        return None
    first = tickets[0]
    if not isinstance(first, dict):
        return None

    links: list[TicketLink] = []
    raw_links = first.get("links")
    if isinstance(raw_links, list):
        for link in raw_links:
            if not isinstance(link, dict):
                continue
            href = link.get("href")
            if isinstance(href, str) and href:
                links.append(TicketLink(href=href))

    return TicketInfo(summary=_safe_str(first.get("summary")), links=links)


def _parse_game(game: Any, position: int) -> GameRecord:
    if not isinstance(game, dict):
        raise MalformedRecordError(f"game at position {position} is not an object")

    competitions = game.get("competitions")
    if not isinstance(competitions, list) or not competitions:
        raise MalformedRecordError(
            f"game id={game.get('id')!r} has no competitions"
        )
    competition = competitions[0]
    if not isinstance(competition, dict):
        raise MalformedRecordError(
            f"game id={game.get('id')!r} has a non-object competition"
        )

    venue = _get_dict(competition, "venue")
    address = _get_dict(venue, "address")
    game_id = _safe_str(game.get("id")) or f"pos-{position}"

    return GameRecord(
        id=game_id,
        name=_safe_str(game.get("name")),
        date=_safe_str(game.get("date")),
        time=_safe_str(game.get("time")),
        venue=_safe_str(venue.get("fullName")),
        city=_safe_str(address.get("city")),
        state=_safe_str(address.get("state")),
        tickets=_parse_tickets(competition),
    )


def count_raw_games(payload: dict[str, Any]) -> int:
    """Number of games listed across every schedule day of *payload*."""
    return sum(len(day["games"]) for day in _schedule_days(payload))


def extract_games(payload: dict[str, Any]) -> list[GameRecord]:
    """Flatten ESPN schedule JSON into GameRecord list.

    Games are emitted in schedule-day order, then list order within a day;
    the result is not sorted. Games without a usable competition entry are
    skipped and logged.
    """

    days = _schedule_days(payload)
    records: list[GameRecord] = []
    position = 0

    for day in days:
        for game in day["games"]:
            try:
                records.append(_parse_game(game, position))
            except MalformedRecordError as exc:
                logger.warning("Skipping malformed game: %s", exc)
            position += 1

    return records
