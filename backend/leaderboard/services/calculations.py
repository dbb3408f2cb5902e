"""Pure calculation functions for leaderboard scoring.

These functions are stateless and have no network or external dependencies,
making them easy to test in isolation. They operate on the raw dict shapes
returned by the FPL API.
"""

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Any, TypedDict

from leaderboard.services.time_windows import MonthKey, month_for_gameweek

# =============================================================================
# TypedDicts for type hints
# =============================================================================


class GameweekRecord(TypedDict):
    """Row of /entry/{id}/history/ -> current."""

    event: int
    points: int


class SquadPick(TypedDict):
    """Row of /entry/{id}/event/{gw}/picks/ -> picks."""

    element: int
    multiplier: int  # 0=bench, 1=playing, 2=captain, 3=triple captain
    is_captain: bool


class LivePlayerStat(TypedDict):
    """Stats block of /event/{gw}/live/ -> elements[]."""

    minutes: int
    total_points: int


# =============================================================================
# Constants
# =============================================================================

UNKNOWN_PLAYER = "Unknown"


class LeaderboardView(StrEnum):
    """Scoring window the table is ranked by."""

    GAMEWEEK = "gameweek"
    MONTHLY = "monthly"
    OVERALL = "overall"


# =============================================================================
# Result types
# =============================================================================


@dataclass(slots=True)
class CaptainInfo:
    """Captain of a squad and whether they have featured yet."""

    player_id: int | None
    name: str
    played: bool


@dataclass(slots=True)
class ManagerScore:
    """One leaderboard row."""

    entry_id: int
    display_name: str
    team_name: str
    gameweek_points: int
    monthly_points: int
    overall_points: int
    played_players: int
    captain_name: str
    captain_played: bool
    rank: int = 0


@dataclass(slots=True)
class PreseasonEntry:
    """A league member listed before the first gameweek is scored."""

    entry_id: int
    display_name: str
    team_name: str
    joined_at: str | None
    rank: int = 0


# =============================================================================
# Helpers
# =============================================================================


def safe_int(val: Any, default: int = 0) -> int:
    """Safely convert API value to int, handling None and empty strings."""
    if val is None or val == "":
        return default
    try:
        return int(val)
    except (ValueError, TypeError):
        return default


def manager_display_name(entry: Mapping[str, Any]) -> str:
    """Full manager name from a standings or new_entries row."""
    first = entry.get("player_first_name")
    last = entry.get("player_last_name")
    if first or last:
        return " ".join(filter(None, [first, last]))
    return entry.get("player_name", "")


def live_stats_by_player(live: Mapping[str, Any] | None) -> dict[int, LivePlayerStat]:
    """Build player_id -> stats from a /event/{gw}/live/ response."""
    if not live:
        return {}
    result: dict[int, LivePlayerStat] = {}
    for element in live.get("elements", []):
        player_id = element.get("id")
        if player_id is None:
            continue
        stats = element.get("stats") or {}
        result[player_id] = {
            "minutes": safe_int(stats.get("minutes")),
            "total_points": safe_int(stats.get("total_points")),
        }
    return result


def player_names_by_id(bootstrap: Mapping[str, Any] | None) -> dict[int, str]:
    """Build player_id -> web_name from bootstrap-static elements."""
    if not bootstrap:
        return {}
    return {
        element["id"]: element.get("web_name", UNKNOWN_PLAYER)
        for element in bootstrap.get("elements", [])
        if "id" in element
    }


# =============================================================================
# Pure Functions
# =============================================================================


def calculate_gameweek_points(
    history: Mapping[str, Any] | None,
    gameweek: int,
) -> int:
    """Points a manager scored in one gameweek.

    Args:
        history: /entry/{id}/history/ response (or None if unavailable)
        gameweek: Gameweek number

    Returns:
        Points for that gameweek, 0 if the history or gameweek is missing
    """
    if not history:
        return 0
    records: list[GameweekRecord] = history.get("current") or []
    for record in records:
        if record.get("event") == gameweek:
            return safe_int(record.get("points"))
    return 0


def calculate_monthly_points(
    history: Mapping[str, Any] | None,
    gameweek_dates: dict[int, datetime],
    month: MonthKey,
) -> int:
    """Sum of points over gameweeks whose first kickoff falls in month.

    Gameweeks without a resolved date are ignored. The live gameweek's partial
    points count towards whichever month that gameweek falls in.

    Args:
        history: /entry/{id}/history/ response (or None if unavailable)
        gameweek_dates: Gameweek -> earliest kickoff index
        month: Target scoring window

    Returns:
        Total points for the month
    """
    if not history:
        return 0
    records: list[GameweekRecord] = history.get("current") or []
    total = 0
    for record in records:
        if month_for_gameweek(gameweek_dates, record.get("event")) == month:
            total += safe_int(record.get("points"))
    return total


def has_played(stats: Mapping[str, Any] | None) -> bool:
    """A player has featured if they have minutes or any points.

    Either condition qualifies: a player on 0 minutes but 3 points (e.g. a
    defensive bonus awarded late) still counts. No live entry means not played.
    """
    if not stats:
        return False
    return safe_int(stats.get("minutes")) > 0 or safe_int(stats.get("total_points")) > 0


def count_played_players(
    picks: Iterable[SquadPick],
    live_stats: Mapping[int, Mapping[str, Any]],
) -> int:
    """Count squad players (bench included) who have featured this gameweek."""
    return sum(1 for pick in picks if has_played(live_stats.get(pick.get("element"))))


def find_captain(picks: Iterable[SquadPick]) -> SquadPick | None:
    """Return the captain pick, falling back to the highest multiplier."""
    picks = list(picks)
    if not picks:
        return None
    for pick in picks:
        if pick.get("is_captain"):
            return pick
    return max(picks, key=lambda p: safe_int(p.get("multiplier")))


def resolve_captain(
    picks: Iterable[SquadPick],
    live_stats: Mapping[int, Mapping[str, Any]],
    player_names: Mapping[int, str],
) -> CaptainInfo:
    """Captain name and played status for a squad."""
    captain = find_captain(picks)
    if captain is None:
        return CaptainInfo(player_id=None, name=UNKNOWN_PLAYER, played=False)
    player_id = captain.get("element")
    return CaptainInfo(
        player_id=player_id,
        name=player_names.get(player_id, UNKNOWN_PLAYER),
        played=has_played(live_stats.get(player_id)),
    )


_VIEW_POINTS: dict[LeaderboardView, Callable[[ManagerScore], int]] = {
    LeaderboardView.GAMEWEEK: lambda s: s.gameweek_points,
    LeaderboardView.MONTHLY: lambda s: s.monthly_points,
    LeaderboardView.OVERALL: lambda s: s.overall_points,
}


def sort_scores(
    scores: Iterable[ManagerScore],
    view: LeaderboardView = LeaderboardView.MONTHLY,
) -> list[ManagerScore]:
    """Order rows by the view's points, then overall, then gameweek points.

    All keys descending. The sort is stable, so rows still tied keep the
    order they arrived in (league standings order).
    """
    points = _VIEW_POINTS[view]
    return sorted(
        scores,
        key=lambda s: (points(s), s.overall_points, s.gameweek_points),
        reverse=True,
    )


def rank_scores(
    scores: Iterable[ManagerScore],
    view: LeaderboardView = LeaderboardView.MONTHLY,
) -> list[ManagerScore]:
    """Sort rows and assign 1-based ranks (no shared ranks)."""
    ranked = sort_scores(scores, view)
    for position, score in enumerate(ranked, start=1):
        score.rank = position
    return ranked


def build_preseason_entries(new_entries: Iterable[Mapping[str, Any]]) -> list[PreseasonEntry]:
    """League members ordered by join date, for leagues with no standings yet.

    Entries without a joined_time sort last.
    """
    rows = sorted(
        new_entries,
        key=lambda e: (e.get("joined_time") is None, e.get("joined_time") or ""),
    )
    return [
        PreseasonEntry(
            entry_id=safe_int(entry.get("entry")),
            display_name=manager_display_name(entry),
            team_name=entry.get("entry_name", ""),
            joined_at=entry.get("joined_time"),
            rank=position,
        )
        for position, entry in enumerate(rows, start=1)
    ]
