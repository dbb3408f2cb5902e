"""Application configuration using pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # FPL API
    fpl_api_base_url: str = "https://fantasy.premierleague.com/api"
    user_agent: str = "FplLeaderboard/1.0 (Mini-league leaderboard)"
    request_timeout: float = 30.0
    max_concurrent_requests: int = 10

    # CORS - comma-separated list of allowed origins
    cors_origins: str = "http://localhost:5173,http://localhost:3000,http://localhost:8000"

    # Logging
    log_level: str = "INFO"

    # Timezone used to bucket gameweek kickoffs into calendar months
    timezone: str = "Europe/London"

    # Cache TTL in seconds, shortest for live data
    cache_ttl_live: int = 60  # 1 minute for live gameweek stats
    cache_ttl_event_status: int = 60
    cache_ttl_standings: int = 300  # 5 minutes
    cache_ttl_picks: int = 300
    cache_ttl_bootstrap: int = 300
    cache_ttl_history: int = 600  # 10 minutes for season history
    cache_ttl_fixtures: int = 600

    # Session
    auto_refresh_seconds: int = 120  # 2 minutes
    league_store_path: str = ".leaderboard_state.json"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins.split(",")]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
