"""Leaderboard session - user intents, persisted league and auto-refresh.

User actions arrive as intents (LoadLeague, Refresh, SwitchView, SwitchMonth)
and are dispatched to a LeaderboardSession, which owns the selected league,
view and month plus the last successfully built table.

Refresh cycles are serialized: an intent arriving while a cycle is running
waits for it, then runs its own cycle against the latest state. Cache misses
shared by both cycles are coalesced by the ResponseCache.
"""

import asyncio
import contextlib
import json
import logging
from dataclasses import dataclass
from pathlib import Path

from leaderboard.services.calculations import LeaderboardView
from leaderboard.services.leaderboard import (
    LeaderboardFetchError,
    LeaderboardService,
    LeagueTable,
)
from leaderboard.services.time_windows import MonthKey

logger = logging.getLogger(__name__)

LOAD_FAILED_MESSAGE = "Failed to load league. Please check the League ID and try again."
REFRESH_FAILED_MESSAGE = "Failed to refresh data. Please try again."


# =============================================================================
# Intents
# =============================================================================


@dataclass(frozen=True, slots=True)
class LoadLeague:
    league_id: int | str


@dataclass(frozen=True, slots=True)
class Refresh:
    pass


@dataclass(frozen=True, slots=True)
class SwitchView:
    view: LeaderboardView | str


@dataclass(frozen=True, slots=True)
class SwitchMonth:
    month: MonthKey | None  # None selects the current month


Intent = LoadLeague | Refresh | SwitchView | SwitchMonth


def parse_league_id(value: int | str) -> int:
    """Validate a league ID typed by the user.

    Raises:
        ValueError: If the value is blank or not a positive integer
    """
    text = str(value).strip()
    if not text:
        raise ValueError("Please enter a League ID")
    try:
        league_id = int(text)
    except ValueError as e:
        raise ValueError(f"Invalid League ID: {text!r}") from e
    if league_id <= 0:
        raise ValueError(f"Invalid League ID: {text!r}")
    return league_id


# =============================================================================
# Persistence
# =============================================================================


class LeagueStore:
    """Remembers the selected league ID across restarts in a small JSON file."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def load(self) -> int | None:
        """Return the stored league ID, or None if nothing usable is stored."""
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            return parse_league_id(data["league_id"])
        except (OSError, KeyError, TypeError, ValueError) as e:
            logger.warning(f"Ignoring unreadable league store {self.path}: {e}")
            return None

    def save(self, league_id: int) -> None:
        self.path.write_text(json.dumps({"league_id": league_id}), encoding="utf-8")


# =============================================================================
# Session
# =============================================================================


@dataclass(slots=True)
class SessionState:
    """Snapshot of a session for the presentation layer.

    table is the last successfully built table; it stays populated when a
    later refresh fails, alongside the error message.
    """

    league_id: int | None
    view: LeaderboardView
    month: MonthKey | None
    table: LeagueTable | None
    error: str | None
    refreshing: bool


class LeaderboardSession:
    """Consumes intents and keeps the latest render-ready table."""

    def __init__(
        self,
        service: LeaderboardService,
        store: LeagueStore | None = None,
    ) -> None:
        self.service = service
        self.store = store
        self.league_id: int | None = None
        self.view = LeaderboardView.GAMEWEEK
        self.month: MonthKey | None = None
        self.table: LeagueTable | None = None
        self.error: str | None = None
        self._refresh_lock = asyncio.Lock()

    @property
    def state(self) -> SessionState:
        return SessionState(
            league_id=self.league_id,
            view=self.view,
            month=self.month,
            table=self.table,
            error=self.error,
            refreshing=self._refresh_lock.locked(),
        )

    async def restore(self) -> SessionState:
        """Load the stored league ID, if any, and build its table."""
        if self.store is None:
            return self.state
        league_id = self.store.load()
        if league_id is None:
            return self.state
        logger.info(f"Restoring stored league {league_id}")
        return await self.dispatch(LoadLeague(league_id))

    async def dispatch(self, intent: Intent) -> SessionState:
        """Apply an intent and run the refresh it implies.

        Raises:
            ValueError: For an invalid league ID or view
            TypeError: For an unknown intent
        """
        if isinstance(intent, LoadLeague):
            league_id = parse_league_id(intent.league_id)
            self.league_id = league_id
            if self.store is not None:
                self.store.save(league_id)
            await self._refresh(LOAD_FAILED_MESSAGE)
        elif isinstance(intent, Refresh):
            await self._refresh(REFRESH_FAILED_MESSAGE)
        elif isinstance(intent, SwitchView):
            self.view = LeaderboardView(intent.view)
            await self._refresh(REFRESH_FAILED_MESSAGE)
        elif isinstance(intent, SwitchMonth):
            self.month = intent.month
            await self._refresh(REFRESH_FAILED_MESSAGE)
        else:
            raise TypeError(f"Unknown intent: {intent!r}")
        return self.state

    async def _refresh(self, failure_message: str) -> None:
        if self.league_id is None:
            return
        async with self._refresh_lock:
            # Read state inside the lock so the latest intent wins
            league_id = self.league_id
            try:
                table = await self.service.build_table(league_id, self.view, self.month)
            except LeaderboardFetchError as e:
                logger.error(f"Refresh of league {league_id} failed: {e}")
                self.error = failure_message
                return
            self.table = table
            self.error = None


class AutoRefresher:
    """Cancellable periodic refresh tied to a session's lifetime."""

    def __init__(self, session: LeaderboardSession, interval: float) -> None:
        self.session = session
        self.interval = interval
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start the background loop (no-op if already running)."""
        if self.running:
            return
        logger.info(f"Starting auto-refresh every {self.interval}s")
        self._task = asyncio.create_task(self._run(), name="leaderboard-auto-refresh")

    async def stop(self) -> None:
        """Cancel the background loop and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("Auto-refresh stopped")

    async def tick(self) -> None:
        """Refresh once; does nothing while no league is selected."""
        if self.session.league_id is None:
            return
        try:
            await self.session.dispatch(Refresh())
        except Exception:
            logger.exception("Auto-refresh failed")

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            await self.tick()
