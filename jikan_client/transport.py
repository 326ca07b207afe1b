"""
Single-request HTTP transport with exponential backoff retries.

Retry policy (attempts are numbered from 1):

    2xx                 -> decoded JSON body
    429 / 5xx           -> retried up to `max_retries` times, then
                           RateLimitError / ServerError
    other 4xx           -> ClientError, never retried
    no usable response  -> retried up to `max_retries` times, then NetworkError
"""
from __future__ import annotations

import logging
import random
import time
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple
from urllib.parse import urlencode

import requests

from .errors import ClientError, NetworkError, RateLimitError, ServerError


logger = logging.getLogger(__name__)

MAX_RETRIES = 3
BASE_BACKOFF = 1.0
MAX_JITTER = 0.5
DEFAULT_TIMEOUT = 10.0


def build_url(base_url: str, endpoint: str, params: Optional[Mapping[str, Any]] = None) -> str:
    """Build an absolute request URL.

    Parameters whose value is None or serializes to an empty string are dropped.
    `sfw=true` is added unless the caller passed an `sfw` key of its own.
    """
    query: Dict[str, Any] = dict(params or {})
    if "sfw" not in query:
        query["sfw"] = "true"

    pairs: List[Tuple[str, str]] = []
    for key, value in query.items():
        if value is None:
            continue
        serialized = _serialize_param(value)
        if serialized == "":
            continue
        pairs.append((str(key), serialized))

    url = f"{base_url.rstrip('/')}{endpoint}"
    if not pairs:
        return url
    return f"{url}?{urlencode(pairs)}"


def _serialize_param(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple, set)):
        return ",".join(map(str, value))
    return str(value)


class RetryingTransport:
    """Performs one logical GET, retrying transient failures.

    Attributes:
        session: requests session used for every attempt.
        timeout: Per-attempt HTTP timeout in seconds.
        max_retries: Retries after the first attempt; 3 means up to 4 requests.
        base_backoff: Delay before the first retry; doubles on each later one.
        max_jitter: Upper bound of the uniform random delay added to backoff.
    """

    def __init__(
        self,
        *,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = MAX_RETRIES,
        base_backoff: float = BASE_BACKOFF,
        max_jitter: float = MAX_JITTER,
        sleep: Callable[[float], None] = time.sleep,
        jitter: Callable[[float, float], float] = random.uniform,
    ) -> None:
        self.session = session or requests.Session()
        self.timeout = timeout
        self.max_retries = max_retries
        self.base_backoff = base_backoff
        self.max_jitter = max_jitter
        self._sleep = sleep
        self._jitter = jitter

    def backoff(self, attempt: int) -> float:
        return self.base_backoff * (2 ** (attempt - 1)) + self._jitter(0, self.max_jitter)

    def fetch(self, url: str) -> Any:
        """GET `url` and return the decoded JSON body."""
        attempt = 0
        while True:
            attempt += 1
            logger.debug("GET %s (attempt %d)", url, attempt)
            try:
                response = self.session.get(url, timeout=self.timeout)
                status = response.status_code
                if 200 <= status < 300:
                    data = response.json()
                    logger.debug("%d %s", status, url)
                    return data
            except (requests.RequestException, ValueError) as exc:
                # JSON decode failures land here too and are retried like a dropped connection.
                if attempt > self.max_retries:
                    raise NetworkError(
                        f"Network error after {attempt} attempts: {exc}", url, attempt
                    ) from exc
                self._wait(attempt, f"Network error ({exc})")
                continue

            if status == 429 or status >= 500:
                if attempt > self.max_retries:
                    if status == 429:
                        raise RateLimitError(url, attempt)
                    raise ServerError(status, response.text, url, attempt)
                self._wait(attempt, "Rate limited (429)" if status == 429 else f"Server error ({status})")
                continue

            raise ClientError(status, response.text, url, attempt)

    def _wait(self, attempt: int, reason: str) -> None:
        delay = self.backoff(attempt)
        logger.warning(
            "%s. Retrying in %.2fs (attempt %d/%d)", reason, delay, attempt, self.max_retries
        )
        self._sleep(delay)
