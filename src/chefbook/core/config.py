from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

from chefbook import __version__


PROJECT_ROOT = Path(__file__).resolve().parents[3]
ENV_PATH = PROJECT_ROOT / ".env"

# Load environment variables as early as possible so Settings picks them up.
if ENV_PATH.exists():
    load_dotenv(ENV_PATH)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(ENV_PATH),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Chefbook API"
    app_version: str = __version__
    docs_url: str = "/docs"
    database_url: str = f"sqlite:///{(PROJECT_ROOT / 'chefbook.db').as_posix()}"
    database_echo: bool = False
    log_level: str = "INFO"

    default_page_size: int = 10
    max_page_size: int = 100

    password_min_length: int = 6
    bcrypt_rounds: int = 10


@lru_cache
def get_settings() -> Settings:
    return Settings()
