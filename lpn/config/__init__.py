"""Configuration management for lpn.

Settings are read from ``LPN_``-prefixed environment variables and an
optional ``.env`` file.

Usage:
    from lpn.config import settings

    settings.workspace
    settings.docker.timeout
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .docker import DockerConfig
from .logging import LoggingConfig


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_prefix="LPN_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Docker Configuration
    docker_base_url: str | None = Field(default=None)
    docker_timeout: int = Field(default=60, ge=10)
    workspace: Path = Field(default_factory=lambda: Path.home() / ".lpn")

    # Docker Hub Configuration
    docker_hub_url: str = Field(default="https://hub.docker.com")
    tags_page_size: int = Field(default=25, ge=1, le=100)
    http_timeout: float = Field(default=10.0, gt=0)

    # Logging Configuration
    log_level: str = Field(default="INFO")
    log_format: Literal["console", "json"] = Field(default="console")
    log_file: str | None = Field(default=None)
    log_max_size_mb: int = Field(default=10, ge=1)
    log_backup_count: int = Field(default=3, ge=1)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("workspace")
    @classmethod
    def expand_workspace(cls, v: Path) -> Path:
        return Path(v).expanduser()

    @property
    def docker(self) -> DockerConfig:
        """Docker settings as a group."""
        return DockerConfig(
            lpn_docker_base_url=self.docker_base_url,
            lpn_docker_timeout=self.docker_timeout,
            lpn_workspace=self.workspace,
        )

    @property
    def logging(self) -> LoggingConfig:
        """Logging settings as a group."""
        return LoggingConfig(
            lpn_log_level=self.log_level,
            lpn_log_format=self.log_format,
            lpn_log_file=self.log_file,
            lpn_log_max_size_mb=self.log_max_size_mb,
            lpn_log_backup_count=self.log_backup_count,
        )


settings = Settings()

__all__ = ["Settings", "settings", "DockerConfig", "LoggingConfig"]
