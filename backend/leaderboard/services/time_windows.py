"""Gameweek to calendar month resolution.

FPL gameweeks don't carry a date of their own, so each gameweek is dated by
the earliest kickoff among its fixtures. Monthly tables then bucket gameweeks
by the month of that date.

The index is always rebuilt from scratch from the latest fixture list, never
merged with a previous one.
"""

import logging
from collections.abc import Iterable
from datetime import UTC, date, datetime, tzinfo
from typing import Any, NamedTuple

logger = logging.getLogger(__name__)


class MonthKey(NamedTuple):
    """A monthly scoring window (month is 1-12)."""

    year: int
    month: int

    @classmethod
    def from_date(cls, value: date) -> "MonthKey":
        return cls(value.year, value.month)

    @classmethod
    def from_parts(cls, year: int | None, month: int | None) -> "MonthKey | None":
        """Month from an optional year and month; None when both are omitted.

        Raises:
            ValueError: If only one of year and month is given
        """
        if year is None and month is None:
            return None
        if year is None or month is None:
            raise ValueError("year and month must be given together")
        return cls(year, month)

    @property
    def label(self) -> str:
        """Human readable label, e.g. 'August 2025'."""
        return date(self.year, self.month, 1).strftime("%B %Y")


def parse_kickoff(value: Any) -> datetime | None:
    """Parse an FPL kickoff_time ('2025-08-15T19:00:00Z') to an aware datetime.

    Returns None for missing or malformed values.
    """
    if not value or not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.debug("Ignoring malformed kickoff_time %r", value)
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def build_gameweek_dates(
    fixtures: Iterable[dict[str, Any]],
    tz: tzinfo = UTC,
) -> dict[int, datetime]:
    """Map each gameweek to the earliest kickoff among its fixtures.

    Fixtures without a gameweek (unscheduled) or without a kickoff time are
    skipped. Kickoffs are converted to tz so month boundaries follow local time.

    Args:
        fixtures: Raw fixture dicts from the /fixtures/ endpoint
        tz: Timezone used for month bucketing

    Returns:
        New dict of gameweek -> earliest kickoff datetime
    """
    index: dict[int, datetime] = {}
    for fixture in fixtures:
        gameweek = fixture.get("event")
        if gameweek is None:
            continue
        kickoff = parse_kickoff(fixture.get("kickoff_time"))
        if kickoff is None:
            continue
        kickoff = kickoff.astimezone(tz)
        current = index.get(gameweek)
        if current is None or kickoff < current:
            index[gameweek] = kickoff
    return index


def month_for_gameweek(index: dict[int, datetime], gameweek: int) -> MonthKey | None:
    """Return the month a gameweek falls in, or None if unresolved."""
    kickoff = index.get(gameweek)
    if kickoff is None:
        return None
    return MonthKey.from_date(kickoff)


def available_months(index: dict[int, datetime], today: date) -> list[MonthKey]:
    """Sorted months with at least one dated gameweek, plus the current month.

    The current month is always included so it stays selectable before any
    of its fixtures are known.
    """
    months = {MonthKey.from_date(kickoff) for kickoff in index.values()}
    months.add(MonthKey.from_date(today))
    return sorted(months)


class GameweekCalendar:
    """Holds the gameweek date index for one session."""

    def __init__(self, tz: tzinfo = UTC) -> None:
        self.tz = tz
        self._index: dict[int, datetime] = {}

    @property
    def index(self) -> dict[int, datetime]:
        return self._index

    def rebuild(self, fixtures: Iterable[dict[str, Any]]) -> None:
        """Replace the index with one built from fixtures."""
        self._index = build_gameweek_dates(fixtures, self.tz)
        logger.debug("Gameweek calendar rebuilt with %d gameweeks", len(self._index))

    def month_for(self, gameweek: int) -> MonthKey | None:
        return month_for_gameweek(self._index, gameweek)

    def available_months(self, today: date) -> list[MonthKey]:
        return available_months(self._index, today)
