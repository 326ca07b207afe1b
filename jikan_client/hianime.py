"""
Hianime (aniwatch-api) client used to resolve streamable episodes.
"""
from __future__ import annotations

import logging
import re
from typing import Any, Dict, Iterable, Optional
from urllib.parse import quote

import requests

from .config import HIANIME_API_BASE


logger = logging.getLogger(__name__)

_EP_ID_RE = re.compile(r"[?&]ep=(\d+)")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]")


class HianimeError(RuntimeError):
    """Hianime API invocation error."""


class HianimeClient:
    """Synchronous client for a self-hosted aniwatch-api instance.

    Responses come wrapped as `{"status": 200, "data": {...}}`; methods return
    the `data` part.
    """

    DEFAULT_BASE_URL = HIANIME_API_BASE

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_BASE_URL,
        session: Optional[requests.Session] = None,
        timeout: float = 10.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def search(self, query: str, *, page: int = 1) -> Dict[str, Any]:
        """Search by title. Result holds `animes`, `totalPages` and `hasNextPage`."""
        return self._get("/api/v2/hianime/search", "search", params={"q": query, "page": page})

    def get_anime_info(self, anime_id: str) -> Dict[str, Any]:
        return self._get(f"/api/v2/hianime/anime/{quote(anime_id, safe='')}", "anime info")

    def get_episodes(self, anime_id: str) -> Dict[str, Any]:
        """Fetch the episode list. Result holds `totalEpisodes` and `episodes`."""
        return self._get(f"/api/v2/hianime/anime/{quote(anime_id, safe='')}/episodes", "episodes")

    def _get(self, path: str, label: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        logger.debug("Hianime %s: %s %s", label, url, params or "")
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            raise HianimeError(f"Hianime {label} failed: {exc}") from exc
        if not response.ok:
            raise HianimeError(f"Hianime {label} failed ({response.status_code})")
        try:
            payload = response.json()
        except ValueError as exc:
            raise HianimeError(f"Hianime {label} returned invalid JSON") from exc
        if not isinstance(payload, dict) or payload.get("status") != 200:
            raise HianimeError(f"Hianime {label} returned unsuccessful response")
        return payload.get("data") or {}


def extract_ep_id(episode_id: Optional[str]) -> Optional[str]:
    """Extract the numeric episode id, e.g. 'steinsgate-3?ep=213' -> '213'."""
    if not episode_id:
        return None
    match = _EP_ID_RE.search(episode_id)
    return match.group(1) if match else None


def _normalize(value: Optional[str]) -> str:
    return _NON_ALNUM_RE.sub("", (value or "").lower())


def find_best_match(query: str, animes: Iterable[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Pick the Hianime search result that best matches a Jikan title.

    Order of preference: exact normalized match on `name` or `jname`, then a
    `name` contained in the query or containing it, then the first TV entry,
    then the first entry.
    """
    candidates = list(animes)
    if not candidates:
        return None
    wanted = _normalize(query)

    for anime in candidates:
        if wanted in (_normalize(anime.get("name")), _normalize(anime.get("jname"))):
            return anime

    for anime in candidates:
        name = _normalize(anime.get("name"))
        if name and (name in wanted or wanted in name):
            return anime

    for anime in candidates:
        if anime.get("type") == "TV":
            return anime
    return candidates[0]
