"""Unit tests for configuration module."""

import os
from unittest.mock import patch

from leaderboard.config import Settings, get_settings


class TestSettings:
    """Tests for Settings configuration class."""

    def test_default_values(self):
        """Settings should have sensible defaults."""
        settings = Settings()

        assert settings.fpl_api_base_url == "https://fantasy.premierleague.com/api"
        assert settings.log_level == "INFO"
        assert settings.timezone == "Europe/London"
        assert settings.auto_refresh_seconds == 120

    def test_cache_ttls_ordered_by_volatility(self):
        """Live data expires soonest, season history and fixtures last."""
        settings = Settings()

        assert settings.cache_ttl_live == 60
        assert settings.cache_ttl_event_status == 60
        assert settings.cache_ttl_standings == 300
        assert settings.cache_ttl_picks == 300
        assert settings.cache_ttl_bootstrap == 300
        assert settings.cache_ttl_history == 600
        assert settings.cache_ttl_fixtures == 600

    def test_cors_origins_list_single(self):
        """CORS origins should be parsed from comma-separated string."""
        settings = Settings(cors_origins="http://localhost:3000")

        assert settings.cors_origins_list == ["http://localhost:3000"]

    def test_cors_origins_list_strips_whitespace(self):
        """Whitespace around CORS origins should be stripped."""
        settings = Settings(cors_origins="  http://a.com  ,  http://b.com  ")

        assert settings.cors_origins_list == ["http://a.com", "http://b.com"]

    @patch.dict(os.environ, {"FPL_API_BASE_URL": "https://custom.api.com"})
    def test_environment_override(self):
        """Settings should be overridable via environment variables."""
        settings = Settings()

        assert settings.fpl_api_base_url == "https://custom.api.com"

    @patch.dict(os.environ, {"CACHE_TTL_LIVE": "30", "AUTO_REFRESH_SECONDS": "90"})
    def test_ttl_and_refresh_override(self):
        settings = Settings()

        assert settings.cache_ttl_live == 30
        assert settings.auto_refresh_seconds == 90

    @patch.dict(os.environ, {"TIMEZONE": "UTC", "LEAGUE_STORE_PATH": "/tmp/league.json"})
    def test_timezone_and_store_override(self):
        settings = Settings()

        assert settings.timezone == "UTC"
        assert settings.league_store_path == "/tmp/league.json"


class TestGetSettings:
    """Tests for get_settings function."""

    def test_caching(self):
        """get_settings should return the same cached instance."""
        get_settings.cache_clear()

        settings1 = get_settings()
        settings2 = get_settings()

        assert isinstance(settings1, Settings)
        assert settings1 is settings2
