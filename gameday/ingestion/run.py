"""CLI entrypoint for printing one week of the schedule."""

from __future__ import annotations

import argparse
import logging

from gameday.ingestion.espn_client import FetchFailedError
from gameday.ingestion.espn_parser import ScheduleShapeError
from gameday.ingestion.schedule import kickoff_display, ticket_url
from gameday.ingestion.schema import GameRecord
from gameday.ingestion.sync import build_week_schedule
from gameday.schedule_state import LOAD_ERROR_MESSAGE


def _positive_int(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid week: {raw}") from exc
    if value < 1:
        raise argparse.ArgumentTypeError("week must be >= 1")
    return value


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Fetch one week of the ESPN NFL schedule and print it by day.",
    )
    parser.add_argument(
        "--week",
        type=_positive_int,
        required=True,
        help="Week number (1-18 for the regular season).",
    )
    parser.add_argument(
        "--year",
        type=int,
        default=None,
        help="Season year (default: SCHEDULE_YEAR or 2024).",
    )
    parser.add_argument(
        "--flat",
        action="store_true",
        help="Print a single kickoff-ordered list instead of day sections.",
    )
    return parser.parse_args()


def _log_game(game: GameRecord) -> None:
    logging.info("  %s | %s", game.name, kickoff_display(game))
    logging.info("    %s, %s, %s", game.venue, game.city, game.state)
    if game.tickets is not None:
        logging.info("    Tickets: %s", game.tickets.summary)
        url = ticket_url(game)
        if url:
            logging.info("    Buy: %s", url)


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    args = _parse_args()
    try:
        schedule = build_week_schedule(args.week, args.year)
    except (FetchFailedError, ScheduleShapeError) as exc:
        logging.error("%s: %s", LOAD_ERROR_MESSAGE, exc)
        raise SystemExit(1)

    logging.info(
        "Week %s %s: %s games (skipped=%s)",
        schedule.week,
        schedule.year,
        len(schedule.games),
        schedule.skipped,
    )
    if args.flat:
        for game in schedule.games:
            _log_game(game)
        return

    for label, games in schedule.days.items():
        logging.info("%s", label)
        for game in games:
            _log_game(game)


if __name__ == "__main__":
    main()
