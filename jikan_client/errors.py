"""
Error types raised by the Jikan client.

Every terminal failure is a `JikanError` subclass tagged with an `ErrorKind`,
so callers can either catch a specific class or branch on `exc.kind`.
"""
from __future__ import annotations

import enum
from typing import Optional


class ErrorKind(str, enum.Enum):
    RATE_LIMITED = "rate_limited"
    SERVER_ERROR = "server_error"
    CLIENT_ERROR = "client_error"
    NETWORK_FAILURE = "network_failure"


class JikanError(RuntimeError):
    """Jikan API invocation error.

    Attributes:
        message: Human readable description.
        url: Fully qualified request URL.
        status: HTTP status code, if a response was received.
        attempt: Attempt number on which the failure became terminal.
    """

    kind: Optional[ErrorKind] = None

    def __init__(
        self,
        message: str,
        *,
        url: str,
        status: Optional[int] = None,
        attempt: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.url = url
        self.status = status
        self.attempt = attempt


class RateLimitError(JikanError):
    """HTTP 429 persisted after every retry."""

    kind = ErrorKind.RATE_LIMITED

    def __init__(self, url: str, attempt: int) -> None:
        super().__init__(f"Rate limited (429) - {url}", url=url, status=429, attempt=attempt)


class ServerError(JikanError):
    """HTTP 5xx persisted after every retry."""

    kind = ErrorKind.SERVER_ERROR

    def __init__(self, status: int, body: str, url: str, attempt: int) -> None:
        super().__init__(f"Server error {status}: {body}", url=url, status=status, attempt=attempt)
        self.body = body


class ClientError(JikanError):
    """Non-429 HTTP 4xx. Never retried."""

    kind = ErrorKind.CLIENT_ERROR

    def __init__(self, status: int, body: str, url: str, attempt: int) -> None:
        super().__init__(f"Client error {status}: {body}", url=url, status=status, attempt=attempt)
        self.body = body


class NetworkError(JikanError):
    """No usable HTTP response after every retry."""

    kind = ErrorKind.NETWORK_FAILURE

    def __init__(self, message: str, url: str, attempt: int) -> None:
        super().__init__(message, url=url, attempt=attempt)
