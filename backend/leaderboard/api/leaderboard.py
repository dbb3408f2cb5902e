"""Leaderboard API routes - ranked league tables by gameweek, month and season."""

import logging
from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, Query

from leaderboard.dependencies import get_leaderboard_service
from leaderboard.schemas.leaderboard import LeagueTableResponse, MonthResponse
from leaderboard.services.calculations import LeaderboardView
from leaderboard.services.leaderboard import LeaderboardFetchError, LeaderboardService
from leaderboard.services.time_windows import MonthKey

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/leaderboard", tags=["leaderboard"])

# Custom Path type for league_id validation (ge=1 for positive integers only)
LeagueIdPath = Annotated[int, Path(ge=1, description="League ID (must be positive)")]


def _month_key(year: int | None, month: int | None) -> MonthKey | None:
    try:
        return MonthKey.from_parts(year, month)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


@router.get("/{league_id}", response_model=LeagueTableResponse)
async def get_leaderboard(
    league_id: LeagueIdPath,
    view: LeaderboardView = Query(default=LeaderboardView.MONTHLY),
    year: int | None = Query(default=None, ge=2000, le=2100),
    month: int | None = Query(default=None, ge=1, le=12),
    service: LeaderboardService = Depends(get_leaderboard_service),
) -> LeagueTableResponse:
    """
    Get the ranked leaderboard for a league.

    Rows are sorted by the view's points, ties broken by overall points and
    then gameweek points. Monthly points are for year/month, or the current
    month when omitted. Leagues with no standings yet return their members in
    join order (mode="preseason").
    """
    selected = _month_key(year, month)
    try:
        table = await service.build_table(league_id, view=view, month=selected)
    except LeaderboardFetchError as e:
        raise HTTPException(
            status_code=502,
            detail="Failed to load league. Please check the League ID and try again.",
        ) from e
    return LeagueTableResponse.from_table(table)


@router.get("/{league_id}/months", response_model=list[MonthResponse])
async def get_available_months(
    league_id: LeagueIdPath,
    service: LeaderboardService = Depends(get_leaderboard_service),
) -> list[MonthResponse]:
    """
    Get the monthly windows that can be selected for a league.

    Includes every month with a dated gameweek plus the current month.
    """
    try:
        fixtures = await service.client.get_fixtures()
    except Exception as e:
        logger.exception(f"Failed to fetch fixtures for league {league_id}: {e}")
        raise HTTPException(
            status_code=502,
            detail="Failed to fetch fixtures. Please try again.",
        ) from e
    service.calendar.rebuild(fixtures or [])
    today = datetime.now(service.tz).date()
    return [MonthResponse.from_key(m) for m in service.calendar.available_months(today)]
