"""API request and response schemas."""

from leaderboard.schemas.leaderboard import (
    LeagueTableResponse,
    LoadLeagueRequest,
    ManagerScoreResponse,
    MonthResponse,
    PreseasonEntryResponse,
    SessionStateResponse,
    SwitchMonthRequest,
    SwitchViewRequest,
)

__all__ = [
    "LeagueTableResponse",
    "LoadLeagueRequest",
    "ManagerScoreResponse",
    "MonthResponse",
    "PreseasonEntryResponse",
    "SessionStateResponse",
    "SwitchMonthRequest",
    "SwitchViewRequest",
]
