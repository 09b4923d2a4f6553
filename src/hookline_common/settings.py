"""
Process settings sourced from .env and HOOKLINE_* environment variables.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _find_env_file() -> Optional[Path]:
    cwd = Path.cwd().resolve()
    for parent in [cwd, *cwd.parents]:
        candidate = parent / ".env"
        if candidate.exists():
            return candidate
    return None


_ENV_PATH = _find_env_file()
if _ENV_PATH is not None:
    load_dotenv(dotenv_path=_ENV_PATH, override=False)


class Settings(BaseSettings):
    """Defaults shared by the filter, the transport and the CLI."""

    model_config = SettingsConfigDict(
        env_prefix="HOOKLINE_",
        env_file=str(_ENV_PATH) if _ENV_PATH is not None else None,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"
    timeout_seconds: float = Field(default=10.0, gt=0)
    user_agent: str = "hookline/0.1"


@lru_cache()
def get_settings() -> Settings:
    """Return a cached settings instance."""
    return Settings()
