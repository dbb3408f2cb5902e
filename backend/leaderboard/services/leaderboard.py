"""Leaderboard service - builds a ranked league table from the FPL API.

A refresh runs in two waves:
    1. standings, event status and fixtures (concurrently). Any failure here
       fails the whole refresh.
    2. per-manager histories and picks, live stats and the player directory
       (concurrently). These need the current gameweek from wave 1. A failure
       for one manager only blanks that manager's derived columns.

If the league has no standings yet (pre-season), the table lists members in
join order instead and wave 2 is skipped.
"""

import asyncio
import logging
from collections.abc import Awaitable
from dataclasses import dataclass, field
from datetime import date, datetime, tzinfo
from typing import Any, Literal, TypeVar
from zoneinfo import ZoneInfo

from leaderboard.services.calculations import (
    LeaderboardView,
    ManagerScore,
    PreseasonEntry,
    build_preseason_entries,
    calculate_gameweek_points,
    calculate_monthly_points,
    count_played_players,
    live_stats_by_player,
    manager_display_name,
    player_names_by_id,
    rank_scores,
    resolve_captain,
    safe_int,
)
from leaderboard.services.fpl_client import FplApiClient
from leaderboard.services.time_windows import GameweekCalendar, MonthKey

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_GAMEWEEK = 1


class LeaderboardFetchError(Exception):
    """Raised when standings, event status or fixtures cannot be fetched."""


@dataclass(slots=True)
class LeagueTable:
    """Render-ready leaderboard for one league."""

    league_id: int
    league_name: str
    member_count: int
    admin_team_name: str | None
    mode: Literal["live", "preseason"]
    view: LeaderboardView
    gameweek: int | None
    month: MonthKey
    available_months: list[MonthKey]
    updated_at: datetime
    managers: list[ManagerScore] = field(default_factory=list)
    preseason: list[PreseasonEntry] = field(default_factory=list)


def current_gameweek_from_status(event_status: dict[str, Any] | None) -> int | None:
    """Gameweek being processed according to /event-status/."""
    for status in (event_status or {}).get("status", []):
        gameweek = safe_int(status.get("event"))
        if gameweek > 0:
            return gameweek
    return None


def current_gameweek_from_bootstrap(bootstrap: dict[str, Any] | None) -> int | None:
    """Gameweek flagged is_current in bootstrap-static events."""
    for event in (bootstrap or {}).get("events", []):
        if event.get("is_current"):
            return event.get("id")
    return None


class LeaderboardService:
    """Aggregates FPL endpoints into a ranked LeagueTable."""

    def __init__(self, client: FplApiClient, tz: tzinfo | None = None) -> None:
        self.client = client
        self.tz = tz or ZoneInfo(client.settings.timezone)
        # Calendar from the most recent refresh
        self.calendar = GameweekCalendar(self.tz)

    async def _fetch_or_none(self, awaitable: Awaitable[T], description: str) -> T | None:
        """Await a secondary fetch, logging and swallowing its failure."""
        try:
            return await awaitable
        except Exception as e:
            logger.warning(f"Failed to fetch {description}: {type(e).__name__}: {e}")
            return None

    async def _fetch_primary(
        self, league_id: int
    ) -> tuple[dict[str, Any], dict[str, Any], list[dict[str, Any]]]:
        try:
            standings, event_status, fixtures = await asyncio.gather(
                self.client.get_league_standings(league_id),
                self.client.get_event_status(),
                self.client.get_fixtures(),
            )
        except Exception as e:
            logger.error(f"Failed to load league {league_id}: {type(e).__name__}: {e}")
            raise LeaderboardFetchError(f"Failed to load league {league_id}") from e
        return standings, event_status, fixtures

    async def _resolve_gameweek(self, event_status: dict[str, Any]) -> int:
        gameweek = current_gameweek_from_status(event_status)
        if gameweek is not None:
            return gameweek
        bootstrap = await self._fetch_or_none(
            self.client.get_bootstrap_static(), "bootstrap-static"
        )
        gameweek = current_gameweek_from_bootstrap(bootstrap)
        if gameweek is None:
            logger.info(f"No current gameweek found, defaulting to {DEFAULT_GAMEWEEK}")
            return DEFAULT_GAMEWEEK
        return gameweek

    async def build_table(
        self,
        league_id: int,
        view: LeaderboardView = LeaderboardView.MONTHLY,
        month: MonthKey | None = None,
        today: date | None = None,
    ) -> LeagueTable:
        """Fetch everything needed and return the ranked table.

        Args:
            league_id: FPL classic league ID
            view: Scoring window used as the primary sort key
            month: Monthly window to total (defaults to the current month)
            today: Override for the current date (tests)

        Returns:
            LeagueTable in live or pre-season mode

        Raises:
            LeaderboardFetchError: If a primary fetch fails
        """
        now = datetime.now(self.tz)
        today = today or now.date()
        selected_month = month or MonthKey.from_date(today)

        standings, event_status, fixtures = await self._fetch_primary(league_id)

        calendar = GameweekCalendar(self.tz)
        calendar.rebuild(fixtures or [])
        self.calendar = calendar

        league = standings.get("league") or {}
        league_name = league.get("name", f"League {league_id}")
        admin_team_name = league.get("entry_name")
        results = (standings.get("standings") or {}).get("results") or []

        if not results:
            new_entries = (standings.get("new_entries") or {}).get("results") or []
            logger.info(
                f"League {league_id} has no standings yet, listing {len(new_entries)} members"
            )
            return LeagueTable(
                league_id=league_id,
                league_name=league_name,
                member_count=len(new_entries),
                admin_team_name=admin_team_name,
                mode="preseason",
                view=view,
                gameweek=None,
                month=selected_month,
                available_months=calendar.available_months(today),
                updated_at=now,
                preseason=build_preseason_entries(new_entries),
            )

        gameweek = await self._resolve_gameweek(event_status)
        managers = await self._score_managers(results, gameweek, calendar, selected_month)

        return LeagueTable(
            league_id=league_id,
            league_name=league_name,
            member_count=len(results),
            admin_team_name=admin_team_name,
            mode="live",
            view=view,
            gameweek=gameweek,
            month=selected_month,
            available_months=calendar.available_months(today),
            updated_at=now,
            managers=rank_scores(managers, view),
        )

    async def _score_managers(
        self,
        results: list[dict[str, Any]],
        gameweek: int,
        calendar: GameweekCalendar,
        month: MonthKey,
    ) -> list[ManagerScore]:
        manager_ids = [safe_int(entry.get("entry")) for entry in results]

        histories, squads, live, bootstrap = await asyncio.gather(
            asyncio.gather(
                *(
                    self._fetch_or_none(
                        self.client.get_entry_history(mid), f"history for manager {mid}"
                    )
                    for mid in manager_ids
                )
            ),
            asyncio.gather(
                *(
                    self._fetch_or_none(
                        self.client.get_entry_picks(mid, gameweek),
                        f"GW{gameweek} picks for manager {mid}",
                    )
                    for mid in manager_ids
                )
            ),
            self._fetch_or_none(self.client.get_event_live(gameweek), f"GW{gameweek} live data"),
            self._fetch_or_none(self.client.get_bootstrap_static(), "bootstrap-static"),
        )

        live_stats = live_stats_by_player(live)
        player_names = player_names_by_id(bootstrap)

        scores: list[ManagerScore] = []
        for entry, manager_id, history, squad in zip(results, manager_ids, histories, squads):
            picks = (squad or {}).get("picks") or []
            captain = resolve_captain(picks, live_stats, player_names)
            scores.append(
                ManagerScore(
                    entry_id=manager_id,
                    display_name=manager_display_name(entry),
                    team_name=entry.get("entry_name", ""),
                    gameweek_points=calculate_gameweek_points(history, gameweek),
                    monthly_points=calculate_monthly_points(history, calendar.index, month),
                    overall_points=safe_int(entry.get("total")),
                    played_players=count_played_players(picks, live_stats),
                    captain_name=captain.name,
                    captain_played=captain.played,
                )
            )
        return scores
