"""Session API routes - user intents against the shared leaderboard session."""

import logging

from fastapi import APIRouter, Depends, HTTPException

from leaderboard.dependencies import get_session
from leaderboard.schemas.leaderboard import (
    LoadLeagueRequest,
    SessionStateResponse,
    SwitchMonthRequest,
    SwitchViewRequest,
)
from leaderboard.services.session import (
    Intent,
    LeaderboardSession,
    LoadLeague,
    Refresh,
    SwitchMonth,
    SwitchView,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/session", tags=["session"])


async def _dispatch(session: LeaderboardSession, intent: Intent) -> SessionStateResponse:
    try:
        state = await session.dispatch(intent)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return SessionStateResponse.from_state(state)


@router.get("", response_model=SessionStateResponse)
async def get_session_state(
    session: LeaderboardSession = Depends(get_session),
) -> SessionStateResponse:
    """Current selection, last successfully built table and last error."""
    return SessionStateResponse.from_state(session.state)


@router.post("/league", response_model=SessionStateResponse)
async def load_league(
    body: LoadLeagueRequest,
    session: LeaderboardSession = Depends(get_session),
) -> SessionStateResponse:
    """Select (and remember) a league, then build its table."""
    return await _dispatch(session, LoadLeague(body.league_id))


@router.post("/refresh", response_model=SessionStateResponse)
async def refresh(
    session: LeaderboardSession = Depends(get_session),
) -> SessionStateResponse:
    """Rebuild the table for the selected league (no-op without one)."""
    return await _dispatch(session, Refresh())


@router.post("/view", response_model=SessionStateResponse)
async def switch_view(
    body: SwitchViewRequest,
    session: LeaderboardSession = Depends(get_session),
) -> SessionStateResponse:
    return await _dispatch(session, SwitchView(body.view))


@router.post("/month", response_model=SessionStateResponse)
async def switch_month(
    body: SwitchMonthRequest,
    session: LeaderboardSession = Depends(get_session),
) -> SessionStateResponse:
    try:
        month = body.to_key()
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return await _dispatch(session, SwitchMonth(month))
