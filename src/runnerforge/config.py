"""Configuration management for Runnerforge using Pydantic Settings."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="RUNNERFORGE_",
        extra="ignore",
    )

    # Creation defaults
    default_build_points: int = Field(
        default=400, description="Build points granted to a new character"
    )
    default_max_availability: int = Field(
        default=12, description="Highest availability purchasable during creation"
    )
    default_allow_forbidden: bool = Field(
        default=False, description="Allow Forbidden items during creation"
    )

    # Reference data
    metatype_file: Path | None = Field(
        default=None, description="Override path for the metatype catalog YAML"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="console", description="Log format (console or json)")

    @property
    def data_dir(self) -> Path:
        """Get the bundled reference data directory."""
        return Path(__file__).parent / "catalog" / "data"

    @property
    def metatype_path(self) -> Path:
        """Get the metatype catalog path, honouring the override."""
        return self.metatype_file or self.data_dir / "metatypes.yaml"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
