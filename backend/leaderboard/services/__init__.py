"""Service layer for business logic."""

from leaderboard.services.fpl_client import FplApiClient
from leaderboard.services.leaderboard import LeaderboardService
from leaderboard.services.session import LeaderboardSession

__all__ = ["FplApiClient", "LeaderboardService", "LeaderboardSession"]
