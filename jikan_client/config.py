"""
Runtime settings read from the environment (and a `.env` file if present).
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

from .cache import DEFAULT_TTL
from .rate_limiter import MIN_INTERVAL
from .transport import DEFAULT_TIMEOUT, MAX_RETRIES


JIKAN_API_BASE = "https://api.jikan.moe/v4"
HIANIME_API_BASE = "https://anivault-hianime-api.vercel.app"


@dataclass(frozen=True)
class Settings:
    jikan_api_base: str = JIKAN_API_BASE
    hianime_api_base: str = HIANIME_API_BASE
    timeout: float = DEFAULT_TIMEOUT
    min_interval: float = MIN_INTERVAL
    max_retries: int = MAX_RETRIES
    cache_ttl: float = DEFAULT_TTL
    log_level: str = "WARNING"


def load_settings() -> Settings:
    """Build `Settings` from environment variables, falling back to defaults."""
    load_dotenv()
    defaults = Settings()
    return Settings(
        jikan_api_base=os.getenv("JIKAN_API_BASE", defaults.jikan_api_base),
        hianime_api_base=os.getenv("HIANIME_API_BASE", defaults.hianime_api_base),
        timeout=float(os.getenv("JIKAN_TIMEOUT", defaults.timeout)),
        min_interval=float(os.getenv("JIKAN_MIN_INTERVAL", defaults.min_interval)),
        max_retries=int(os.getenv("JIKAN_MAX_RETRIES", defaults.max_retries)),
        cache_ttl=float(os.getenv("JIKAN_CACHE_TTL", defaults.cache_ttl)),
        log_level=os.getenv("LOG_LEVEL", defaults.log_level).upper(),
    )


def configure_logging(level: str = "WARNING") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
