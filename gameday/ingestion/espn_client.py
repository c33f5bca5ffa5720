"""ESPN HTTP client for fetching the weekly NFL schedule."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlencode

import requests

from gameday.settings import get_settings

logger = logging.getLogger(__name__)
MAX_ERROR_SNIPPET = 300


class FetchFailedError(RuntimeError):
    pass


def _truncate(value: str, limit: int = MAX_ERROR_SNIPPET) -> str:
    if len(value) <= limit:
        return value
    return value[:limit] + "...<truncated>"


def validate_week(week: Any) -> int:
    if isinstance(week, bool) or not isinstance(week, int) or week < 1:
        raise ValueError(f"week must be a positive integer, got {week!r}")
    return week


def build_schedule_url(week: int, year: int | None = None) -> str:
    settings = get_settings()
    params = {
        "xhr": "1",
        "year": str(year if year is not None else settings.season_year),
        "week": str(validate_week(week)),
    }
    return f"{settings.schedule_base_url}?{urlencode(params)}"


def fetch_schedule(week: int, year: int | None = None) -> dict[str, Any]:
    """Fetch the raw ESPN schedule payload for one week.

    Issues exactly one GET. Network errors, non-2xx responses and bodies that
    do not decode to a JSON object all raise FetchFailedError.
    """

    settings = get_settings()
    url = build_schedule_url(week, year)
    headers = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }

    try:
        response = requests.get(
            url,
            headers=headers,
            timeout=(settings.connect_timeout_seconds, settings.read_timeout_seconds),
        )
    except requests.RequestException as exc:
        logger.error("ESPN schedule request failed url=%s error=%s", url, exc)
        raise FetchFailedError(f"ESPN schedule request failed: {exc}") from exc

    if not 200 <= response.status_code < 300:
        body_snippet = _truncate(response.text or "")
        logger.error(
            "ESPN schedule non-2xx status=%s body=%s",
            response.status_code,
            body_snippet,
        )
        raise FetchFailedError(
            f"ESPN schedule returned status {response.status_code}"
        )

    try:
        payload = response.json()
    except ValueError as exc:
        logger.error(
            "ESPN schedule non-JSON body=%s", _truncate(response.text or "")
        )
        raise FetchFailedError("ESPN schedule returned non-JSON response") from exc

    if not isinstance(payload, dict):
        logger.error("ESPN schedule unexpected body type=%s", type(payload).__name__)
        raise FetchFailedError("ESPN schedule response was not a JSON object")

    logger.info("Fetched ESPN schedule week=%s url=%s", week, url)
    return payload
