"""Shared fakes for geocoding tests. No test touches the network."""

import pytest

from spatial_geocode.geocoding import ThrottleRegistry


class FakeClock:
    """Monotonic clock that only moves when slept on or advanced."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start
        self.sleeps = []

    def monotonic(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeFetch:
    """Returns canned JSON values in order; exceptions in the list are raised."""

    def __init__(self, *responses) -> None:
        self.responses = list(responses)
        self.urls = []

    def __call__(self, url: str):
        self.urls.append(url)
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def registry():
    return ThrottleRegistry()


@pytest.fixture
def make_kwargs(clock, registry):
    """Strategy keyword arguments wired to fakes."""

    def _make(fetch):
        return {
            "registry": registry,
            "fetch": fetch,
            "clock": clock.monotonic,
            "sleeper": clock.sleep,
        }

    return _make
