"""Docker configuration."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings


class DockerConfig(BaseSettings):
    """Docker engine settings."""

    base_url: str | None = Field(default=None, alias="lpn_docker_base_url")
    timeout: int = Field(default=60, ge=10, alias="lpn_docker_timeout")

    # Host directory holding bind-mounted database data
    workspace: Path = Field(
        default_factory=lambda: Path.home() / ".lpn", alias="lpn_workspace"
    )

    class Config:
        env_prefix = ""
        extra = "ignore"
