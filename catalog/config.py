"""
Configuration for the catalog service.

Settings come from environment variables; a local .env file is honoured.
"""
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


@dataclass
class Settings:
    """Runtime settings for the catalog service."""

    database_url: Optional[str] = None
    database_name: str = "catalog"
    backend: str = "memory"            # "memory" or "mongo"
    seed_sample_data: bool = False
    host: str = "0.0.0.0"
    port: int = 8085

    @classmethod
    def from_env(cls) -> "Settings":
        database_url = os.getenv("DATABASE_URL") or None
        default_backend = "mongo" if database_url else "memory"
        return cls(
            database_url=database_url,
            database_name=os.getenv("DATABASE_NAME", "catalog"),
            backend=os.getenv("STORE_BACKEND", default_backend).strip().lower(),
            seed_sample_data=_env_flag("SEED_SAMPLE_DATA"),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", 8085)),
        )
