from typing import Optional

from pydantic import BaseModel

from gameday.ingestion.schedule import kickoff_display, ticket_url
from gameday.ingestion.schema import GameRecord, TicketInfo
from gameday.schedule_state import ScheduleSnapshot


class GameOut(BaseModel):
    id: str
    name: str
    date: str
    time: str
    kickoff: str
    venue: str
    city: str
    state: str
    tickets: Optional[TicketInfo] = None
    ticket_url: Optional[str] = None

    @classmethod
    def from_record(cls, game: GameRecord) -> "GameOut":
        return cls(
            id=game.id,
            name=game.name,
            date=game.date,
            time=game.time,
            kickoff=kickoff_display(game),
            venue=game.venue,
            city=game.city,
            state=game.state,
            tickets=game.tickets,
            ticket_url=ticket_url(game),
        )


class ScheduleOut(BaseModel):
    status: str
    loading: bool
    error: Optional[str] = None
    week: Optional[int] = None
    year: Optional[int] = None
    count: int
    games: list[GameOut]
    days: dict[str, list[GameOut]]

    @classmethod
    def from_snapshot(cls, snapshot: ScheduleSnapshot) -> "ScheduleOut":
        return cls(
            status=snapshot.status,
            loading=snapshot.loading,
            error=snapshot.error,
            week=snapshot.week,
            year=snapshot.year,
            count=len(snapshot.games),
            games=[GameOut.from_record(game) for game in snapshot.games],
            days={
                label: [GameOut.from_record(game) for game in bucket]
                for label, bucket in snapshot.days.items()
            },
        )


class WeeksOut(BaseModel):
    weeks: list[int]
    selected: Optional[int] = None
    year: int
