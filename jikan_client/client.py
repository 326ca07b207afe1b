"""
Jikan v4 API client implementation.

Composes the response cache, the dispatch queue and the retrying transport
into a single `get`, and exposes convenience methods for the endpoints the
front-end uses.
"""
from __future__ import annotations

import logging
import threading
from typing import Any, Dict, List, Optional, Tuple, Union

import requests

from .cache import DEFAULT_TTL, ResponseCache
from .config import JIKAN_API_BASE, Settings
from .errors import JikanError
from .rate_limiter import MIN_INTERVAL, DispatchQueue
from .transport import DEFAULT_TIMEOUT, MAX_RETRIES, RetryingTransport, build_url


logger = logging.getLogger(__name__)

DETAIL_TTL = 30 * 60.0
GENRES_TTL = 24 * 60 * 60.0


class JikanClient:
    """Client for the Jikan (MyAnimeList) REST API.

    One instance is meant to be built at startup and shared by every caller,
    since the rate limit applies to the whole process.

    Attributes:
        base_url: Base URL of the API, customizable for testing.
        cache: Response cache keyed by request URL.
        limiter: Dispatch queue spacing outbound requests.
        transport: Retrying HTTP transport.
    """

    DEFAULT_BASE_URL = JIKAN_API_BASE

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_BASE_URL,
        session: Optional[requests.Session] = None,
        cache: Optional[ResponseCache] = None,
        limiter: Optional[DispatchQueue] = None,
        transport: Optional[RetryingTransport] = None,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = MAX_RETRIES,
        min_interval: float = MIN_INTERVAL,
        cache_ttl: float = DEFAULT_TTL,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        # ResponseCache defines __len__, so an empty one is falsy.
        self.cache = cache if cache is not None else ResponseCache(default_ttl=cache_ttl)
        self.limiter = limiter if limiter is not None else DispatchQueue(min_interval=min_interval)
        if transport is None:
            transport = RetryingTransport(session=session, timeout=timeout, max_retries=max_retries)
        self.transport = transport
        self._genres: Optional[Dict[str, Any]] = None
        self._genres_lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Settings, **overrides: Any) -> "JikanClient":
        options: Dict[str, Any] = {
            "base_url": settings.jikan_api_base,
            "timeout": settings.timeout,
            "max_retries": settings.max_retries,
            "min_interval": settings.min_interval,
            "cache_ttl": settings.cache_ttl,
        }
        options.update(overrides)
        return cls(**options)

    # --------------------------------------------------------------------- #
    # Core request
    # --------------------------------------------------------------------- #
    def get(
        self,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        *,
        skip_cache: bool = False,
        cache_ttl: Optional[float] = None,
    ) -> Any:
        """GET `endpoint` through the cache, the rate limiter and the transport.

        Args:
            endpoint: Path below the base URL, e.g. "/anime".
            params: Query parameters; see `build_url` for filtering rules.
            skip_cache: Bypass the cache read. The fresh result is still stored.
            cache_ttl: Lifetime of the stored result in seconds.

        Raises:
            JikanError: One of its subclasses once retries are exhausted.
        """
        url = build_url(self.base_url, endpoint, params)

        if not skip_cache:
            cached = self.cache.get(url)
            if cached is not None:
                logger.debug("Cache hit: %s", url)
                return cached

        future = self.limiter.enqueue(lambda: self.transport.fetch(url))
        data = future.result()

        self.cache.set(url, data, cache_ttl)
        return data

    # --------------------------------------------------------------------- #
    # Public methods
    # --------------------------------------------------------------------- #
    def search_anime(self, **params: Any) -> Dict[str, Any]:
        """Search anime with filters.

        Accepted keys mirror Jikan's: q, type, status, rating, min_score,
        max_score, genres, order_by, sort, page, limit, sfw.
        """
        return self.get("/anime", {"limit": 24, **params})

    def get_top_anime(self, filter: Optional[str] = None, page: int = 1) -> Dict[str, Any]:
        """Fetch top anime; `filter` is one of airing, upcoming, bypopularity, favorite."""
        params: Dict[str, Any] = {"page": page, "limit": 15}
        if filter:
            params["filter"] = filter
        return self.get("/top/anime", params)

    def get_season_now(self, page: int = 1) -> Dict[str, Any]:
        return self.get("/seasons/now", {"page": page, "limit": 15})

    def get_season_upcoming(self, page: int = 1) -> Dict[str, Any]:
        return self.get("/seasons/upcoming", {"page": page, "limit": 10})

    def get_anime_by_id(self, anime_id: Union[int, str]) -> Dict[str, Any]:
        """Fetch full anime details by MyAnimeList id."""
        return self.get(f"/anime/{anime_id}/full", cache_ttl=DETAIL_TTL)

    def get_anime_recommendations(self, anime_id: Union[int, str]) -> Dict[str, Any]:
        return self.get(f"/anime/{anime_id}/recommendations", cache_ttl=DETAIL_TTL)

    def get_genres(self) -> Dict[str, Any]:
        """Fetch anime genres. Kept for the client's lifetime once fetched."""
        with self._genres_lock:
            if self._genres is not None:
                return self._genres
        data = self.get("/genres/anime", cache_ttl=GENRES_TTL)
        with self._genres_lock:
            self._genres = data
        return data

    def clear_cache(self) -> None:
        """Drop all cached responses, including the genre list.

        Requests already queued or in flight are not cancelled.
        """
        self.cache.clear()
        with self._genres_lock:
            self._genres = None


# ------------------------------------------------------------------------- #
# Helpers
# ------------------------------------------------------------------------- #
def data_list(payload: Any) -> List[Dict[str, Any]]:
    """Return the `data` list of a Jikan envelope, or an empty list."""
    if isinstance(payload, dict):
        content = payload.get("data")
        if isinstance(content, list):
            return content
    return []


def fetch_anime_detail(
    client: JikanClient,
    anime_id: Union[int, str],
) -> Tuple[Dict[str, Any], List[Dict[str, Any]]]:
    """Fetch an anime's details together with its recommendations.

    A failed recommendation lookup yields an empty list; a failed detail
    lookup is raised.

    Returns:
        Tuple of the detail record and the recommendation list.
    """
    detail = client.get_anime_by_id(anime_id)
    try:
        recommendations = data_list(client.get_anime_recommendations(anime_id))
    except JikanError as exc:
        logger.error("Failed to fetch recommendations for anime %s: %s", anime_id, exc)
        recommendations = []
    record = detail.get("data") if isinstance(detail, dict) else None
    return record if isinstance(record, dict) else {}, recommendations
