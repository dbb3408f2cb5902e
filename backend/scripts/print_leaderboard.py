#!/usr/bin/env python
"""
Print a league leaderboard to the terminal.

Usage:
    python -m scripts.print_leaderboard 314
    python -m scripts.print_leaderboard 314 --view monthly --month 2025-09
"""

import argparse
import asyncio
import logging
import os
import sys

from dotenv import load_dotenv

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from leaderboard.services.calculations import LeaderboardView
from leaderboard.services.fpl_client import FplApiClient
from leaderboard.services.leaderboard import LeaderboardFetchError, LeaderboardService, LeagueTable
from leaderboard.services.time_windows import MonthKey

# Load environment
load_dotenv(".env.local")
load_dotenv(".env")

# Configure logging
logging.basicConfig(
    level=logging.WARNING,
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def parse_month(value: str) -> MonthKey:
    """Parse YYYY-MM into a MonthKey."""
    try:
        year, month = (int(part) for part in value.split("-"))
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"Expected YYYY-MM, got {value!r}") from e
    if not 1 <= month <= 12:
        raise argparse.ArgumentTypeError(f"Month out of range: {value!r}")
    return MonthKey(year, month)


def format_table(table: LeagueTable) -> str:
    lines = [f"{table.league_name} ({table.league_id})"]

    if table.mode == "preseason":
        lines.append("Pre-season: members by join date")
        for entry in table.preseason:
            lines.append(
                f"{entry.rank:>3}  {entry.display_name:<24} {entry.team_name:<24} "
                f"{entry.joined_at or '-'}"
            )
        return "\n".join(lines)

    lines.append(f"GW{table.gameweek} | {table.month.label} | sorted by {table.view}")
    lines.append(
        f"{'#':>3}  {'Manager':<24} {'Team':<24} {'GW':>4} {'Month':>6} {'Total':>6} "
        f"{'Played':>6}  Captain"
    )
    for m in table.managers:
        captain = f"{m.captain_name}{'' if m.captain_played else ' (yet to play)'}"
        lines.append(
            f"{m.rank:>3}  {m.display_name:<24} {m.team_name:<24} {m.gameweek_points:>4} "
            f"{m.monthly_points:>6} {m.overall_points:>6} {m.played_players:>4}/15  {captain}"
        )
    return "\n".join(lines)


async def main() -> None:
    parser = argparse.ArgumentParser(description="Print an FPL mini-league leaderboard")
    parser.add_argument("league_id", type=int, help="FPL classic league ID")
    parser.add_argument(
        "--view",
        choices=[v.value for v in LeaderboardView],
        default=LeaderboardView.MONTHLY.value,
        help="Points column to sort by",
    )
    parser.add_argument(
        "--month",
        type=parse_month,
        default=None,
        help="Monthly window as YYYY-MM (default: current month)",
    )
    args = parser.parse_args()

    async with FplApiClient() as client:
        service = LeaderboardService(client)
        try:
            table = await service.build_table(
                args.league_id,
                view=LeaderboardView(args.view),
                month=args.month,
            )
        except LeaderboardFetchError as e:
            logger.error(f"{e}. Please check the League ID and try again.")
            sys.exit(1)

    print(format_table(table))


if __name__ == "__main__":
    asyncio.run(main())
