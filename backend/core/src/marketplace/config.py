"""Application settings loaded from the environment.

Values come from environment variables (case-insensitive) or a local
``.env`` file found in the working directory or one of its parents.

Usage:
    from marketplace.config import get_settings

    settings = get_settings()
    settings.blocking_statuses(Vertical.STAY)
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from marketplace.models.enums import BookingStatus, Vertical


def find_env_file(env_file: str = ".env") -> str:
    """Locate the nearest env file walking up from the working directory."""
    current_path = Path.cwd()

    for path in [current_path] + list(current_path.parents):
        env_path = path / env_file
        if env_path.exists():
            return str(env_path)

    return env_file


class Settings(BaseSettings):
    """Runtime configuration for services and the API."""

    model_config = SettingsConfigDict(
        env_file=find_env_file(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    environment: str = "dev"
    # Overrides the default "marketplace-{environment}" table prefix
    dynamodb_table_prefix: str | None = None

    # Reservation statuses that hold dates, per vertical. Stays lock at
    # request time, vehicles only once the partner confirms.
    vehicle_blocking_statuses: frozenset[BookingStatus] = Field(
        default=frozenset({BookingStatus.CONFIRMED, BookingStatus.ACTIVE}),
    )
    stay_blocking_statuses: frozenset[BookingStatus] = Field(
        default=frozenset(
            {BookingStatus.PENDING, BookingStatus.CONFIRMED, BookingStatus.ACTIVE}
        ),
    )

    currency_label: str = "Rs"
    cors_origins: list[str] = Field(
        default=["http://localhost:3000", "http://127.0.0.1:3000"],
    )
    log_level: str = "INFO"

    @property
    def table_prefix(self) -> str:
        """Prefix applied to every DynamoDB table name."""
        return self.dynamodb_table_prefix or f"marketplace-{self.environment}"

    def blocking_statuses(self, vertical: Vertical) -> frozenset[BookingStatus]:
        """Statuses that count toward availability conflicts for a vertical."""
        if vertical == Vertical.VEHICLE:
            return self.vehicle_blocking_statuses
        return self.stay_blocking_statuses


@lru_cache
def get_settings() -> Settings:
    """Get cached Settings instance."""
    return Settings()
