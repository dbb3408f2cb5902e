"""Shared pytest fixtures for backend tests.

Sample data describes a three-manager league at GW5 of a season whose
GW1-3 kick off in August and GW4-5 in September:

| Manager | Entry | Total | Aug | Sep | GW5 |
|---------|-------|-------|-----|-----|-----|
| Alice   | 101   | 300   | 180 | 120 | 60  |
| Bob     | 102   | 280   | 160 | 120 | 50  |
| Cara    | 103   | 290   | 150 | 140 | 60  |
"""

from collections.abc import Iterator
from typing import Any

import pytest
import respx
from httpx import ASGITransport, AsyncClient

from leaderboard.config import Settings
from leaderboard.main import app
from tests.factories import (
    CURRENT_GW,
    FPL_BASE_URL,
    HISTORY_POINTS,
    make_history,
    make_picks,
    standings_row,
)


@pytest.fixture
def sample_standings_response() -> dict[str, Any]:
    return {
        "league": {"id": 314, "name": "Test League", "admin_entry": 101, "entry_name": "Alpha FC"},
        "new_entries": {"has_next": False, "page": 1, "results": []},
        "standings": {
            "has_next": False,
            "page": 1,
            "results": [
                standings_row(101, "Alice Smith", "Alpha FC", 300, 1),
                standings_row(103, "Cara White", "Charlie FC", 290, 2),
                standings_row(102, "Bob Jones", "Bravo FC", 280, 3),
            ],
        },
    }


@pytest.fixture
def sample_preseason_standings_response() -> dict[str, Any]:
    return {
        "league": {"id": 314, "name": "Test League", "admin_entry": 101, "entry_name": "Alpha FC"},
        "new_entries": {
            "has_next": False,
            "page": 1,
            "results": [
                {
                    "entry": 202,
                    "entry_name": "Second FC",
                    "joined_time": "2025-07-20T09:00:00Z",
                    "player_first_name": "Sam",
                    "player_last_name": "Second",
                },
                {
                    "entry": 203,
                    "entry_name": "Third FC",
                    "joined_time": "2025-07-25T09:00:00Z",
                    "player_first_name": "Tia",
                    "player_last_name": "Third",
                },
                {
                    "entry": 201,
                    "entry_name": "First FC",
                    "joined_time": "2025-07-10T09:00:00Z",
                    "player_first_name": "Fay",
                    "player_last_name": "First",
                },
            ],
        },
        "standings": {"has_next": False, "page": 1, "results": []},
    }


@pytest.fixture
def sample_event_status_response() -> dict[str, Any]:
    return {
        "status": [
            {"bonus_added": False, "date": "2025-09-20", "event": CURRENT_GW, "points": "l"},
            {"bonus_added": False, "date": "2025-09-21", "event": CURRENT_GW, "points": ""},
        ],
        "leagues": "Updated",
    }


@pytest.fixture
def sample_fixtures_response() -> list[dict[str, Any]]:
    return [
        {"id": 2, "event": 1, "kickoff_time": "2025-08-16T11:30:00Z"},
        {"id": 1, "event": 1, "kickoff_time": "2025-08-15T19:00:00Z"},
        {"id": 11, "event": 2, "kickoff_time": "2025-08-22T19:00:00Z"},
        {"id": 21, "event": 3, "kickoff_time": "2025-08-30T11:30:00Z"},
        {"id": 31, "event": 4, "kickoff_time": "2025-09-13T11:30:00Z"},
        {"id": 41, "event": 5, "kickoff_time": "2025-09-20T11:30:00Z"},
        {"id": 51, "event": 6, "kickoff_time": None},  # Not yet scheduled
        {"id": 99, "event": None, "kickoff_time": None},  # Postponed
    ]


@pytest.fixture
def sample_live_response() -> dict[str, Any]:
    """Live stats for GW5; elements 9-11, 14 and 15 have no entry."""
    stats = {
        1: (90, 10),
        2: (0, 3),  # Points without minutes still counts as played
        3: (0, 0),
        4: (90, 2),
        5: (90, 2),
        6: (90, 6),
        7: (90, 2),
        8: (45, 1),
        12: (0, 0),
        13: (30, 1),  # Bench player who came on
    }
    return {
        "elements": [
            {"id": element, "stats": {"minutes": minutes, "total_points": points}}
            for element, (minutes, points) in stats.items()
        ]
    }


@pytest.fixture
def sample_bootstrap_response() -> dict[str, Any]:
    elements = [{"id": i, "web_name": f"Player {i}"} for i in range(1, 16)]
    elements[0]["web_name"] = "Salah"
    elements[2]["web_name"] = "Haaland"
    return {
        "elements": elements,
        "teams": [],
        "events": [
            {"id": 4, "is_current": False, "finished": True},
            {"id": CURRENT_GW, "is_current": True, "finished": False},
        ],
    }


@pytest.fixture
def settings() -> Settings:
    return Settings(timezone="Europe/London", league_store_path="unused.json")


@pytest.fixture
def fpl_api() -> Iterator[respx.MockRouter]:
    """respx router for the FPL API; unmatched requests raise."""
    with respx.mock(base_url=FPL_BASE_URL, assert_all_called=False) as router:
        yield router


@pytest.fixture
def mock_league(
    fpl_api: respx.MockRouter,
    sample_standings_response: dict[str, Any],
    sample_event_status_response: dict[str, Any],
    sample_fixtures_response: list[dict[str, Any]],
    sample_live_response: dict[str, Any],
    sample_bootstrap_response: dict[str, Any],
) -> respx.MockRouter:
    """Register every endpoint a GW5 refresh of league 314 needs."""
    fpl_api.get("/leagues-classic/314/standings/", name="standings").respond(
        json=sample_standings_response
    )
    fpl_api.get("/event-status/", name="event_status").respond(
        json=sample_event_status_response
    )
    fpl_api.get("/fixtures/", name="fixtures").respond(json=sample_fixtures_response)
    fpl_api.get(f"/event/{CURRENT_GW}/live/", name="live").respond(json=sample_live_response)
    fpl_api.get("/bootstrap-static/", name="bootstrap").respond(json=sample_bootstrap_response)
    for entry, points in HISTORY_POINTS.items():
        fpl_api.get(f"/entry/{entry}/history/", name=f"history_{entry}").respond(
            json=make_history(points)
        )
    fpl_api.get(f"/entry/101/event/{CURRENT_GW}/picks/", name="picks_101").respond(
        json=make_picks(captain=1)
    )
    fpl_api.get(f"/entry/102/event/{CURRENT_GW}/picks/", name="picks_102").respond(
        json=make_picks(captain=3)
    )
    fpl_api.get(f"/entry/103/event/{CURRENT_GW}/picks/", name="picks_103").respond(
        json=make_picks(captain=6)
    )
    return fpl_api


@pytest.fixture
async def async_client():
    """Async HTTP client for testing the FastAPI app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
