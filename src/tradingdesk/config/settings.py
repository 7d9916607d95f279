"""Application settings and configuration."""

from pathlib import Path
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_SIMULATION_SYMBOLS = ["AAPL", "GOOGL", "MSFT", "AMZN", "TSLA"]


def get_default_data_dir() -> Path:
    """Return the default data directory."""
    return Path.cwd() / "data"


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    app_name: str = "Trading Desk API"
    app_version: str = "0.1.0"
    log_level: str = "INFO"

    # Data directory (sqlite database lives here unless database_url is set)
    data_dir: Optional[Path] = None
    database_url: Optional[str] = None

    # Upstream quote provider
    alpha_vantage_api_key: str = "demo"
    alpha_vantage_base_url: str = "https://www.alphavantage.co/query"
    upstream_timeout_seconds: float = 10.0
    history_timeout_seconds: float = 15.0
    # 5 calls per minute on the free tier
    rate_limit_interval_seconds: float = 12.0

    # Quote cache
    cache_backend: Literal["memory", "redis"] = "memory"
    redis_url: str = "redis://localhost:6379/0"
    price_cache_ttl_seconds: int = 30
    history_cache_ttl_seconds: int = 300
    search_cache_ttl_seconds: int = 3600

    # Simulated live feed
    price_simulation_enabled: bool = False
    price_simulation_interval_seconds: float = 5.0
    price_simulation_ttl_seconds: int = 60
    price_simulation_symbols: list[str] = DEFAULT_SIMULATION_SYMBOLS

    # Seed for synthetic data; None gives non-reproducible output
    synthetic_seed: Optional[int] = None

    def get_data_dir(self) -> Path:
        """Get the data directory, creating it if needed."""
        data_dir = self.data_dir or get_default_data_dir()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    def get_database_url(self) -> str:
        """Get database URL, deriving from data_dir if not set."""
        if self.database_url:
            return self.database_url
        db_path = self.get_data_dir() / "tradingdesk.db"
        return f"sqlite:///{db_path}"


# Global settings instance (can be replaced at runtime)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Return the current settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Set the global settings instance."""
    global _settings
    _settings = settings


def reset_settings() -> None:
    """Reset settings to force reload."""
    global _settings
    _settings = None
