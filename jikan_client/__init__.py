"""
Jikan API client package.

This package contains:
- `client`: rate-limited, cached Jikan client with retry capabilities
- `cache`, `rate_limiter`, `transport`: the layers the client composes
- `errors`: typed failures raised once retries are exhausted
- `hianime`: streaming catalog client and episode helpers
- `cli`: command-line front-end
"""

from .cache import ResponseCache
from .client import JikanClient, fetch_anime_detail
from .errors import ClientError, ErrorKind, JikanError, NetworkError, RateLimitError, ServerError
from .hianime import HianimeClient, HianimeError, extract_ep_id, find_best_match
from .rate_limiter import DispatchQueue
from .transport import RetryingTransport, build_url

__all__ = [
    "ClientError",
    "DispatchQueue",
    "ErrorKind",
    "HianimeClient",
    "HianimeError",
    "JikanClient",
    "JikanError",
    "NetworkError",
    "RateLimitError",
    "ResponseCache",
    "RetryingTransport",
    "ServerError",
    "build_url",
    "extract_ep_id",
    "fetch_anime_detail",
    "find_best_match",
]
