"""Configuration settings for Repoverse.

Two layers:
- Settings: process environment (token, log level, pacing), via pydantic-settings
- SyncConfig: the repositories that take part in a sync, loaded from a JSON file
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings, SettingsConfigDict

from repoverse.schemas.repository import RepositoryConfig


class ConfigurationError(Exception):
    """Raised when the sync configuration file is missing or invalid."""

    pass


class PacingConfig(BaseModel):
    """Configuration for request concurrency against the GitHub API."""

    max_concurrent_requests: int = Field(
        default=5,
        ge=1,
        le=100,
        description="Maximum parallel GitHub API requests",
    )


class LoggingConfig(BaseModel):
    """Configuration for logging behavior.

    Controls file logging, rotation, and output format.
    """

    log_file: str | None = Field(
        default=None,
        description="Optional path for file logging (enables rotation)",
    )
    rotation: str = Field(
        default="10 MB",
        description="When to rotate log file (e.g., '10 MB', '1 day')",
    )
    retention: str = Field(
        default="7 days",
        description="How long to keep rotated logs",
    )
    serialize: bool = Field(
        default=False,
        description="If True, output JSON format to file",
    )


class SyncConfig(BaseModel):
    """Repositories taking part in a sync and how sync branches are named.

    Accepts both camelCase (``syncBranchPrefix``) and snake_case keys so
    existing JSON configs keep working.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    repositories: list[RepositoryConfig] = Field(
        min_length=1,
        description="Every repository that shares the synced directory",
    )
    sync_branch_prefix: str = Field(
        default="repoverse-sync",
        min_length=1,
        description="Prefix for generated sync branch names",
    )
    access_token: str = Field(
        default="",
        repr=False,
        description="GitHub token; falls back to GITHUB_TOKEN when empty",
    )

    def find_repository(self, owner: str, repo: str) -> RepositoryConfig | None:
        """Return the configured repository matching owner/repo, if any."""
        for repository in self.repositories:
            if repository.owner == owner and repository.repo == repo:
                return repository
        return None


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    # --------------------------------------------------------------------------
    # GitHub API
    # --------------------------------------------------------------------------
    github_token: str = Field(
        default="",
        description="GitHub personal access token",
    )

    # --------------------------------------------------------------------------
    # Application
    # --------------------------------------------------------------------------
    config_file: str = Field(
        default="repoverse.json",
        description="Path to the JSON sync configuration",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    # --------------------------------------------------------------------------
    # Pacing
    # --------------------------------------------------------------------------
    pacing: PacingConfig = Field(
        default_factory=PacingConfig,
        description="Request concurrency configuration",
    )

    # --------------------------------------------------------------------------
    # Logging Configuration
    # --------------------------------------------------------------------------
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging configuration (file output, rotation)",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def load_sync_config(path: str | Path | None = None) -> SyncConfig:
    """Load and validate the sync configuration file.

    Args:
        path: JSON file to read. Defaults to Settings.config_file.

    Returns:
        Validated SyncConfig

    Raises:
        ConfigurationError: If the file is missing or fails validation
    """
    config_path = Path(path) if path is not None else Path(get_settings().config_file)
    if not config_path.is_file():
        raise ConfigurationError(f"Sync configuration not found: {config_path}")

    try:
        return SyncConfig.model_validate_json(config_path.read_text(encoding="utf-8"))
    except ValidationError as e:
        raise ConfigurationError(f"Invalid sync configuration in {config_path}: {e}") from e
