from functools import lru_cache
from typing import List

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings

from core.errors import ConfigError


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # The Odds API
    ODDS_API_KEY: str = ""
    ODDS_API_BASE_URL: str = "https://api.the-odds-api.com/v4"
    REQUEST_TIMEOUT: float = 20.0

    # Regions
    REGION: str = "eu"
    REGIONS: str = "eu"  # default to a single region to save quota

    # Rate limiting (seconds between requests)
    SNAPSHOT_THROTTLE_SECONDS: float = 0.2
    SCAN_THROTTLE_SECONDS: float = 0.15

    # Output paths
    DATA_DIR: str = "data"
    OUTPUT_DIR: str = "."
    HISTORY_FILE: str = "scan_history.csv"
    HISTORY_QUOTING: str = "literal"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "odds.log"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @field_validator("ODDS_API_KEY", "REGION", "REGIONS", mode="before")
    @classmethod
    def _strip(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("HISTORY_QUOTING")
    @classmethod
    def _check_quoting(cls, value: str) -> str:
        value = value.strip().lower()
        if value not in ("literal", "csv"):
            raise ValueError("HISTORY_QUOTING must be 'literal' or 'csv'")
        return value

    @property
    def region(self) -> str:
        return self.REGION or "eu"

    @property
    def region_list(self) -> List[str]:
        """Scan regions from the comma-separated REGIONS value."""
        regions = [r.strip() for r in self.REGIONS.split(",")]
        return [r for r in regions if r] or ["eu"]

    def require_api_key(self) -> str:
        if not self.ODDS_API_KEY:
            raise ConfigError("Missing ODDS_API_KEY in environment or .env")
        return self.ODDS_API_KEY


def load_settings(**overrides) -> Settings:
    """Build a fresh settings object. Entry points call this once at startup."""
    try:
        return Settings(**overrides)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings used for ambient concerns such as logging."""
    return Settings()
