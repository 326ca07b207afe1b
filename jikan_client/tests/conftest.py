from typing import List

import pytest

from jikan_client.client import JikanClient
from jikan_client.transport import RetryingTransport


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingSleep:
    def __init__(self) -> None:
        self.calls: List[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sleeps():
    return RecordingSleep()


@pytest.fixture
def transport(sleeps):
    return RetryingTransport(sleep=sleeps, jitter=lambda low, high: 0.25)


@pytest.fixture
def make_client(transport):
    def factory(**kwargs):
        kwargs.setdefault("transport", transport)
        kwargs.setdefault("min_interval", 0)
        return JikanClient(**kwargs)

    return factory
