"""Tests for the print_leaderboard script helpers."""

import argparse
from datetime import UTC, datetime

import pytest

from leaderboard.services.calculations import LeaderboardView, ManagerScore, PreseasonEntry
from leaderboard.services.leaderboard import LeagueTable
from leaderboard.services.time_windows import MonthKey


def make_table(**overrides) -> LeagueTable:
    fields = {
        "league_id": 314,
        "league_name": "Test League",
        "member_count": 1,
        "admin_team_name": "Alpha FC",
        "mode": "live",
        "view": LeaderboardView.MONTHLY,
        "gameweek": 5,
        "month": MonthKey(2025, 9),
        "available_months": [MonthKey(2025, 8), MonthKey(2025, 9)],
        "updated_at": datetime(2025, 9, 21, 12, 0, tzinfo=UTC),
    }
    fields.update(overrides)
    return LeagueTable(**fields)


class TestParseMonth:
    def test_valid(self):
        from scripts.print_leaderboard import parse_month

        assert parse_month("2025-09") == MonthKey(2025, 9)

    @pytest.mark.parametrize("value", ["2025", "2025-13", "Sep 2025", "2025-00"])
    def test_invalid(self, value: str):
        from scripts.print_leaderboard import parse_month

        with pytest.raises(argparse.ArgumentTypeError):
            parse_month(value)


class TestFormatTable:
    def test_live_table(self):
        from scripts.print_leaderboard import format_table

        table = make_table(
            managers=[
                ManagerScore(
                    entry_id=103,
                    display_name="Cara White",
                    team_name="Charlie FC",
                    gameweek_points=60,
                    monthly_points=140,
                    overall_points=290,
                    played_players=8,
                    captain_name="Haaland",
                    captain_played=False,
                    rank=1,
                )
            ]
        )

        output = format_table(table)

        assert "Test League (314)" in output
        assert "GW5 | September 2025 | sorted by monthly" in output
        assert "Cara White" in output
        assert "8/15" in output
        assert "Haaland (yet to play)" in output

    def test_preseason_table(self):
        from scripts.print_leaderboard import format_table

        table = make_table(
            mode="preseason",
            gameweek=None,
            preseason=[
                PreseasonEntry(
                    entry_id=201,
                    display_name="Fay First",
                    team_name="First FC",
                    joined_at="2025-07-10T09:00:00Z",
                    rank=1,
                )
            ],
        )

        output = format_table(table)

        assert "Pre-season" in output
        assert "Fay First" in output
        assert "2025-07-10T09:00:00Z" in output
