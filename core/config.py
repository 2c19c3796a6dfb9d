"""Configuration loaded from environment / .env file."""

from typing import Literal

from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Process-wide settings, read from ``DEPBUMP_*`` environment variables."""

    dry_run: bool = False
    platform_endpoint: str = "https://api.github.com"
    token: str = ""
    cache_ttl_minutes: int = 15
    http_timeout: float = 30.0
    max_concurrency: int = 6
    log_level: str = "WARNING"

    model_config = SettingsConfigDict(
        env_prefix="DEPBUMP_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )


class RepoConfig(BaseModel):
    """Per-branch settings used by the automerge worker."""

    branch_name: str
    automerge: bool = False
    automerge_type: Literal["branch", "pr"] = "pr"
    ignore_tests: bool = False
    base_branch: str = "main"


_global_config: Settings | None = None


def get_global_config() -> Settings:
    """Return the active settings, loading them from the environment on first use."""
    global _global_config
    if _global_config is None:
        _global_config = Settings()
    return _global_config


def set_global_config(settings: Settings | None) -> None:
    """Replace the active settings; ``None`` forces a reload on next access."""
    global _global_config
    _global_config = settings
