from __future__ import annotations

import logging
import unittest
from unittest.mock import patch

from fastapi.testclient import TestClient

from gameday import main
from gameday.ingestion.espn_client import FetchFailedError
from gameday.log_buffer import FetchCycleLog
from gameday.schedule_state import LOAD_ERROR_MESSAGE, ScheduleBoard


def _payload() -> dict:
    return {
        "content": {
            "schedule": {
                "20241103": {
                    "games": [
                        {
                            "id": "401671789",
                            "name": "Denver Broncos at Baltimore Ravens",
                            "date": "2024-11-03",
                            "time": "13:00",
                            "competitions": [
                                {
                                    "venue": {
                                        "fullName": "M&T Bank Stadium",
                                        "address": {"city": "Baltimore", "state": "MD"},
                                    },
                                    "tickets": [
                                        {
                                            "summary": "Tickets as low as $120",
                                            "links": [{"href": "https://tickets.example/401671789"}],
                                        }
                                    ],
                                }
                            ],
                        },
                        {
                            "id": "401671790",
                            "name": "Miami Dolphins at Buffalo Bills",
                            "date": "2024-11-03",
                            "time": "10:00",
                            "competitions": [
                                {
                                    "venue": {
                                        "fullName": "Highmark Stadium",
                                        "address": {"city": "Orchard Park", "state": "NY"},
                                    },
                                    "tickets": [],
                                }
                            ],
                        },
                    ]
                },
                "20241104": {
                    "games": [
                        {
                            "id": "401671791",
                            "name": "Tampa Bay Buccaneers at Kansas City Chiefs",
                            "date": "2024-11-04",
                            "time": "20:15",
                            "competitions": [
                                {
                                    "venue": {
                                        "fullName": "GEHA Field at Arrowhead Stadium",
                                        "address": {"city": "Kansas City", "state": "MO"},
                                    },
                                    "tickets": [],
                                }
                            ],
                        }
                    ]
                },
            }
        }
    }


class ScheduleApiTests(unittest.TestCase):
    def setUp(self) -> None:
        board_patch = patch.object(main, "board", ScheduleBoard())
        board_patch.start()
        self.addCleanup(board_patch.stop)
        self.client = TestClient(main.app)

    def test_schedule_is_idle_before_any_selection(self) -> None:
        response = self.client.get("/api/schedule")

        self.assertEqual(200, response.status_code)
        body = response.json()
        self.assertEqual("idle", body["status"])
        self.assertEqual(0, body["count"])

    def test_select_week_returns_grouped_schedule(self) -> None:
        with patch("gameday.ingestion.sync.fetch_schedule", return_value=_payload()) as mock_fetch:
            response = self.client.post("/api/schedule/week", params={"week": 9})

        self.assertEqual(200, response.status_code)
        self.assertEqual(9, mock_fetch.call_args.args[0])
        body = response.json()
        self.assertEqual("loaded", body["status"])
        self.assertFalse(body["loading"])
        self.assertIsNone(body["error"])
        self.assertEqual(3, body["count"])
        self.assertEqual(
            ["401671790", "401671789", "401671791"],
            [game["id"] for game in body["games"]],
        )
        self.assertEqual(["November 3", "November 4"], list(body["days"]))
        self.assertEqual(2, len(body["days"]["November 3"]))
        first = body["games"][0]
        self.assertIsNone(first["tickets"])
        self.assertIsNone(first["ticket_url"])
        self.assertEqual(
            "https://tickets.example/401671789", body["games"][1]["ticket_url"]
        )

    def test_select_week_rejects_non_positive_week(self) -> None:
        response = self.client.post("/api/schedule/week", params={"week": 0})

        self.assertEqual(422, response.status_code)

    def test_select_week_reports_generic_error(self) -> None:
        with patch(
            "gameday.ingestion.sync.fetch_schedule",
            side_effect=FetchFailedError("ESPN schedule returned status 500"),
        ):
            response = self.client.post("/api/schedule/week", params={"week": 9})

        body = response.json()
        self.assertEqual(200, response.status_code)
        self.assertEqual("error", body["status"])
        self.assertEqual(LOAD_ERROR_MESSAGE, body["error"])
        self.assertEqual([], body["games"])

    def test_weeks_lists_regular_season(self) -> None:
        body = self.client.get("/api/schedule/weeks").json()

        self.assertEqual(list(range(1, 19)), body["weeks"])
        self.assertIsNone(body["selected"])

    def test_ticket_redirect_uses_first_link(self) -> None:
        with patch("gameday.ingestion.sync.fetch_schedule", return_value=_payload()):
            self.client.post("/api/schedule/week", params={"week": 9})

        response = self.client.get(
            "/api/games/401671789/tickets", follow_redirects=False
        )

        self.assertEqual(307, response.status_code)
        self.assertEqual("https://tickets.example/401671789", response.headers["location"])

    def test_ticket_redirect_404_without_tickets(self) -> None:
        with patch("gameday.ingestion.sync.fetch_schedule", return_value=_payload()):
            self.client.post("/api/schedule/week", params={"week": 9})

        self.assertEqual(404, self.client.get("/api/games/401671790/tickets").status_code)
        self.assertEqual(404, self.client.get("/api/games/unknown/tickets").status_code)

    def test_ticket_redirect_not_confused_by_missing_ids(self) -> None:
        payload = _payload()
        games = payload["content"]["schedule"]["20241103"]["games"]
        games[0]["id"] = "1"
        games[1]["id"] = None
        games[1]["competitions"][0]["tickets"] = [
            {"summary": "From $60", "links": [{"href": "https://tickets.example/other"}]}
        ]

        with patch("gameday.ingestion.sync.fetch_schedule", return_value=payload):
            self.client.post("/api/schedule/week", params={"week": 9})

        response = self.client.get("/api/games/1/tickets", follow_redirects=False)

        self.assertEqual(307, response.status_code)
        self.assertEqual("https://tickets.example/401671789", response.headers["location"])

    def test_logs_endpoint_filters_by_fetch_cycle(self) -> None:
        cycle_log = FetchCycleLog()
        project_logger = logging.getLogger("gameday")
        previous_level = project_logger.level
        project_logger.addHandler(cycle_log)
        project_logger.setLevel(logging.DEBUG)
        self.addCleanup(project_logger.setLevel, previous_level)
        self.addCleanup(project_logger.removeHandler, cycle_log)

        with patch.object(main, "get_cycle_log", return_value=cycle_log):
            with patch("gameday.ingestion.sync.fetch_schedule", return_value=_payload()):
                self.client.post("/api/schedule/week", params={"week": 9})
            with patch(
                "gameday.ingestion.sync.fetch_schedule",
                side_effect=FetchFailedError("ESPN schedule returned status 502"),
            ):
                self.client.post("/api/schedule/week", params={"week": 10})

            current = self.client.get("/api/logs", params={"current": True}).json()
            week_nine = self.client.get("/api/logs", params={"week": 9}).json()
            limited = self.client.get("/api/logs", params={"limit": 1}).json()

        self.assertEqual(2, current["request_id"])
        self.assertTrue(current["entries"])
        self.assertTrue(all(entry["week"] == 10 for entry in current["entries"]))
        self.assertTrue(any(entry["level"] == "ERROR" for entry in current["entries"]))

        self.assertTrue(week_nine["entries"])
        self.assertTrue(all(entry["request_id"] == 1 for entry in week_nine["entries"]))
        self.assertTrue(
            any(entry["logger"] == "gameday.ingestion.sync" for entry in week_nine["entries"])
        )

        self.assertEqual(1, len(limited["entries"]))
        self.assertEqual(10, limited["entries"][0]["week"])


if __name__ == "__main__":
    unittest.main()
