from __future__ import annotations

import asyncio
import logging

from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import RedirectResponse

from gameday.ingestion.schedule import ticket_url
from gameday.ingestion.sync import load_week
from gameday.log_buffer import get_cycle_log, install_cycle_log
from gameday.schedule_state import ScheduleBoard
from gameday.schemas import ScheduleOut, WeeksOut
from gameday.settings import get_settings

SELECTABLE_WEEKS = list(range(1, 19))

app = FastAPI(title="Gameday Schedule")
logger = logging.getLogger(__name__)
board = ScheduleBoard()
_initial_load_task: asyncio.Task | None = None


async def _run_initial_load(week: int) -> None:
    try:
        await asyncio.to_thread(load_week, board, week)
    except Exception:
        logger.exception("Initial schedule load failed week=%s", week)


@app.on_event("startup")
async def start_initial_load() -> None:
    global _initial_load_task
    install_cycle_log()
    settings = get_settings()
    if not settings.load_on_startup:
        logger.info("Startup schedule load disabled.")
        return
    logger.info("App starting up, loading default week=%s", settings.default_week)
    _initial_load_task = asyncio.create_task(_run_initial_load(settings.default_week))


@app.on_event("shutdown")
async def stop_initial_load() -> None:
    global _initial_load_task
    if _initial_load_task and not _initial_load_task.done():
        _initial_load_task.cancel()
        try:
            await _initial_load_task
        except asyncio.CancelledError:
            pass
    _initial_load_task = None


@app.get("/api/schedule", response_model=ScheduleOut)
def api_schedule():
    return ScheduleOut.from_snapshot(board.snapshot())


@app.post("/api/schedule/week", response_model=ScheduleOut)
async def api_select_week(week: int = Query(..., ge=1)):
    result = await asyncio.to_thread(load_week, board, week)
    if not result.applied:
        logger.info(
            "Week %s result superseded by request_id=%s",
            week,
            board.latest_request_id,
        )
    return ScheduleOut.from_snapshot(board.snapshot())


@app.get("/api/schedule/weeks", response_model=WeeksOut)
def api_schedule_weeks():
    snapshot = board.snapshot()
    return WeeksOut(
        weeks=SELECTABLE_WEEKS,
        selected=snapshot.week,
        year=snapshot.year or get_settings().season_year,
    )


@app.get("/api/games/{game_id}/tickets")
def api_game_tickets(game_id: str):
    game = board.find_game(game_id)
    if game is None:
        raise HTTPException(status_code=404, detail="Game not found")
    url = ticket_url(game)
    if url is None:
        raise HTTPException(status_code=404, detail="No tickets available")
    return RedirectResponse(url, status_code=307)


@app.get("/api/logs")
def api_logs(
    limit: int = 100,
    request_id: int | None = None,
    week: int | None = None,
    current: bool = False,
):
    if current:
        request_id = board.snapshot().request_id
    entries = get_cycle_log().entries(limit=limit, request_id=request_id, week=week)
    return {"request_id": request_id, "week": week, "entries": entries}
