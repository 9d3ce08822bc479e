from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Tuple

from dotenv import load_dotenv

DEFAULT_PORT = 3000
DEFAULT_PAGE_SIZE = 20


@dataclass(frozen=True)
class Settings:
    database_url: str = "sqlite:///./pokedex.sqlite3"
    assets_dir: Path = Path("assets")
    public_base_url: str = f"http://localhost:{DEFAULT_PORT}"
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    page_size: int = DEFAULT_PAGE_SIZE
    cors_origins: Tuple[str, ...] = field(default_factory=lambda: ("*",))
    log_level: str = "INFO"


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


def load_settings() -> Settings:
    """Read settings from the environment (and a local .env, if any)."""
    load_dotenv()

    port = _int_env("POKEDEX_PORT", DEFAULT_PORT)
    origins = os.getenv("POKEDEX_CORS_ORIGINS", "*")

    return Settings(
        database_url=os.getenv("POKEDEX_DATABASE_URL", Settings.database_url),
        assets_dir=Path(os.getenv("POKEDEX_ASSETS_DIR", "assets")),
        # в базе лежат абсолютные URL картинок, поэтому хост задаётся явно
        public_base_url=os.getenv(
            "POKEDEX_PUBLIC_BASE_URL", f"http://localhost:{port}"
        ).rstrip("/"),
        host=os.getenv("POKEDEX_HOST", Settings.host),
        port=port,
        page_size=max(1, _int_env("POKEDEX_PAGE_SIZE", DEFAULT_PAGE_SIZE)),
        cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip()),
        log_level=os.getenv("POKEDEX_LOG_LEVEL", Settings.log_level).upper(),
    )
