"""Leaderboard API response schemas.

Row models are populated directly from the service dataclasses using
model_validate(obj, from_attributes=True).
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from leaderboard.services.calculations import LeaderboardView
from leaderboard.services.leaderboard import LeagueTable
from leaderboard.services.session import SessionState
from leaderboard.services.time_windows import MonthKey


class MonthResponse(BaseModel):
    """A selectable monthly window."""

    year: int
    month: int = Field(ge=1, le=12)
    label: str

    @classmethod
    def from_key(cls, key: MonthKey) -> "MonthResponse":
        return cls(year=key.year, month=key.month, label=key.label)


class ManagerScoreResponse(BaseModel):
    """A ranked leaderboard row."""

    model_config = ConfigDict(from_attributes=True)

    rank: int = Field(ge=1)
    entry_id: int
    display_name: str
    team_name: str
    gameweek_points: int
    monthly_points: int
    overall_points: int
    played_players: int = Field(ge=0, le=15)
    captain_name: str
    captain_played: bool


class PreseasonEntryResponse(BaseModel):
    """A league member listed by join date before scoring starts."""

    model_config = ConfigDict(from_attributes=True)

    rank: int = Field(ge=1)
    entry_id: int
    display_name: str
    team_name: str
    joined_at: str | None


class LeagueTableResponse(BaseModel):
    """Leaderboard for one league and view."""

    league_id: int
    league_name: str
    member_count: int = Field(ge=0)
    admin_team_name: str | None
    mode: Literal["live", "preseason"]
    view: LeaderboardView
    gameweek: int | None
    month: MonthResponse
    available_months: list[MonthResponse]
    updated_at: datetime
    managers: list[ManagerScoreResponse]
    preseason: list[PreseasonEntryResponse]

    @classmethod
    def from_table(cls, table: LeagueTable) -> "LeagueTableResponse":
        return cls(
            league_id=table.league_id,
            league_name=table.league_name,
            member_count=table.member_count,
            admin_team_name=table.admin_team_name,
            mode=table.mode,
            view=table.view,
            gameweek=table.gameweek,
            month=MonthResponse.from_key(table.month),
            available_months=[MonthResponse.from_key(m) for m in table.available_months],
            updated_at=table.updated_at,
            managers=[
                ManagerScoreResponse.model_validate(m, from_attributes=True)
                for m in table.managers
            ],
            preseason=[
                PreseasonEntryResponse.model_validate(p, from_attributes=True)
                for p in table.preseason
            ],
        )


class SessionStateResponse(BaseModel):
    """Current session: selection, last good table and last error."""

    league_id: int | None
    view: LeaderboardView
    month: MonthResponse | None
    table: LeagueTableResponse | None
    error: str | None
    refreshing: bool

    @classmethod
    def from_state(cls, state: SessionState) -> "SessionStateResponse":
        return cls(
            league_id=state.league_id,
            view=state.view,
            month=MonthResponse.from_key(state.month) if state.month else None,
            table=LeagueTableResponse.from_table(state.table) if state.table else None,
            error=state.error,
            refreshing=state.refreshing,
        )


class LoadLeagueRequest(BaseModel):
    league_id: int | str = Field(description="FPL classic league ID")


class SwitchViewRequest(BaseModel):
    view: LeaderboardView


class SwitchMonthRequest(BaseModel):
    """Select a monthly window; omit both fields for the current month."""

    year: int | None = None
    month: int | None = Field(default=None, ge=1, le=12)

    def to_key(self) -> MonthKey | None:
        """Raises ValueError if only one of year and month is given."""
        return MonthKey.from_parts(self.year, self.month)
