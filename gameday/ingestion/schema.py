"""Internal data contract for schedule games."""

from typing import Optional

from pydantic import BaseModel


class TicketLink(BaseModel):
    href: str

    class Config:
        frozen = True


class TicketInfo(BaseModel):
    summary: str = ""
    links: list[TicketLink] = []

    class Config:
        frozen = True


class GameRecord(BaseModel):
    """
    Flattened representation of one scheduled game used across
    fetch -> extract -> sort -> group -> API.
    """

    id: str
    name: str = ""
    date: str = ""
    time: str = ""
    venue: str = ""
    city: str = ""
    state: str = ""

    # Absent when the source lists no ticket offers
    tickets: Optional[TicketInfo] = None

    class Config:
        frozen = True
