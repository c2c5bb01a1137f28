"""
Configuration management for PlaneTracker.

Loads settings from environment variables with sensible defaults.
All configuration is centralized here to avoid magic strings scattered
throughout the codebase.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class OpenSkyConfig:
    """OpenSky API configuration (anonymous access only)."""
    base_url: str = os.getenv('OPENSKY_BASE_URL', 'https://opensky-network.org/api')
    timeout_seconds: float = float(os.getenv('OPENSKY_TIMEOUT_SECONDS', '30'))

    # Window searched by the route lookup endpoint
    route_lookback_hours: int = int(os.getenv('ROUTE_LOOKBACK_HOURS', '24'))


@dataclass(frozen=True)
class RefreshConfig:
    """Background refresh settings."""
    interval_seconds: float = float(os.getenv('REFRESH_INTERVAL_SECONDS', '30'))
    stop_timeout_seconds: float = 5.0  # How long stop() waits for the loop thread


@dataclass(frozen=True)
class QueryConfig:
    """Limits for list queries served over HTTP."""
    default_limit: int = 500
    max_limit: int = 5000


@dataclass(frozen=True)
class AppConfig:
    """Main application configuration."""
    opensky: OpenSkyConfig
    refresh: RefreshConfig
    query: QueryConfig

    # Serve the fixed mock snapshot instead of polling OpenSky
    use_mock_data: bool

    # Flask settings
    secret_key: str
    debug: bool


def load_config() -> AppConfig:
    """Load and validate all configuration."""
    return AppConfig(
        opensky=OpenSkyConfig(),
        refresh=RefreshConfig(),
        query=QueryConfig(),
        use_mock_data=os.getenv('USE_MOCK_DATA', '0') == '1',
        secret_key=os.getenv('SECRET_KEY', 'dev-key-change-in-prod'),
        debug=os.getenv('FLASK_DEBUG', '0') == '1',
    )


# Singleton instance
config = load_config()
