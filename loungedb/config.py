"""Runtime settings read from the environment.

A ``.env`` file at the project root is loaded first (best-effort); values
already present in the process environment win. See README.md for
the list of ``LOUNGEDB_*`` variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))


@dataclass(frozen=True)
class Settings:
    source_base_url: str
    data_dir: str
    airport_delay: float
    lounge_delay: float
    http_timeout: float
    user_agent: str
    cache_ttl: float
    # None: use the full IATA table shipped with the airportsdata package
    airports_path: Optional[str]
    log_level: str


_settings: Optional[Settings] = None


def _load_env_from_file() -> None:
    """Load variables from ``<project root>/.env`` without overriding the environment."""
    env_path = os.path.join(PROJECT_ROOT, ".env")
    if not os.path.isfile(env_path):
        return
    try:
        with open(env_path, "r", encoding="utf-8") as f:
            for line in f:
                s = line.strip()
                if not s or s.startswith("#") or "=" not in s:
                    continue
                key, val = s.split("=", 1)
                key = key.strip()
                val = val.strip().strip('"').strip("'")
                if key and (key not in os.environ or not os.environ[key]):
                    os.environ[key] = val
    except OSError:
        # .env is optional
        pass


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be a number, got {raw!r}") from None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _load_env_from_file()
        _settings = Settings(
            source_base_url=(os.getenv("LOUNGEDB_SOURCE_BASE_URL") or "https://next.loungebuddy.com").rstrip("/"),
            data_dir=os.getenv("LOUNGEDB_DATA_DIR") or os.path.join(PROJECT_ROOT, "db"),
            airport_delay=_env_float("LOUNGEDB_AIRPORT_DELAY", 0.5),
            lounge_delay=_env_float("LOUNGEDB_LOUNGE_DELAY", 0.1),
            http_timeout=_env_float("LOUNGEDB_HTTP_TIMEOUT", 15.0),
            user_agent=os.getenv("LOUNGEDB_USER_AGENT") or "loungedb-crawler/0.1",
            cache_ttl=_env_float("LOUNGEDB_CACHE_TTL", 3600.0),
            airports_path=os.getenv("LOUNGEDB_AIRPORTS_PATH") or None,
            log_level=(os.getenv("LOUNGEDB_LOG_LEVEL") or "INFO").upper(),
        )
    return _settings


def reset_settings() -> None:
    global _settings
    _settings = None
