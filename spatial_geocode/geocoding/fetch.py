"""Loading provider JSON over HTTP, with a single retry."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

import requests

USER_AGENT = "spatial-geocode/0.1"
REQUEST_TIMEOUT = 10

JsonFetcher = Callable[[str], Any]


def empty_results() -> dict:
    """The value used in place of a response that could not be loaded."""
    return {"results": []}


@dataclass(frozen=True)
class FetchResult:
    """Outcome of load_json_try_twice.

    ``degraded`` is True when both attempts failed and ``value`` is the
    empty-results fallback rather than a provider response.
    """

    value: Any
    degraded: bool = False


def load_json(url: str) -> Any:
    """Fetch ``url`` and decode its JSON body."""
    headers = {
        "User-Agent": USER_AGENT,
        "Accept-Language": "en",
    }
    resp = requests.get(url, headers=headers, timeout=REQUEST_TIMEOUT)
    resp.raise_for_status()
    return resp.json()


def load_json_try_twice(
    url: str,
    fetch: JsonFetcher = load_json,
    logger: Optional[logging.Logger] = None,
) -> FetchResult:
    """Load JSON from ``url``, retrying once before falling back to no results."""
    log = logger if logger is not None else logging.getLogger(__name__)
    try:
        return FetchResult(fetch(url))
    except Exception as e:
        log.info("Failed to load JSON: %s", e)
    try:
        return FetchResult(fetch(url))
    except Exception as e:
        log.info("Failed to load JSON a second time, returning an empty object: %s", e)
    return FetchResult(empty_results(), degraded=True)
