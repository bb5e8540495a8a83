import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List

_DEFAULT_CORS_ORIGINS = (
    "http://localhost:3000",
    "http://127.0.0.1:3000",
)


def _default_database_url() -> str:
    """Default DB path: a SQLite file next to the working directory."""
    return "sqlite+aiosqlite:///./match_ratings.db"


def _parse_origins(raw: str | None) -> List[str]:
    if not raw:
        return list(_DEFAULT_CORS_ORIGINS)
    return [o.strip() for o in raw.split(",") if o.strip()]


@dataclass
class Settings:
    """Application settings loaded from environment variables with safe defaults."""

    app_name: str = "Match Ratings"
    env: str = "dev"
    database_url: str = field(default_factory=_default_database_url)
    log_level: str = "INFO"
    cors_allowed_origins: List[str] = field(
        default_factory=lambda: list(_DEFAULT_CORS_ORIGINS)
    )

    @classmethod
    def from_env(cls) -> "Settings":
        """Create Settings from environment variables."""
        db_url = os.getenv("DATABASE_URL") or _default_database_url()
        return cls(
            app_name=os.getenv("APP_NAME", cls.app_name),
            env=os.getenv("ENV", cls.env),
            database_url=db_url,
            log_level=os.getenv("LOG_LEVEL", cls.log_level),
            cors_allowed_origins=_parse_origins(os.getenv("CORS_ALLOWED_ORIGINS")),
        )


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings.from_env()
