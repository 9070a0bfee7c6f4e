"""Abstract base class for geocoding strategies."""

from __future__ import annotations

import itertools
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Iterable, Iterator, List, Mapping, Optional
from urllib.parse import quote_plus

from .errors import InvalidConfigurationError, UnparseableResponseError
from .fetch import FetchResult, JsonFetcher, load_json, load_json_try_twice
from .result import GeocodeResult
from .throttle import (
    DEFAULT_REGISTRY,
    DEFAULT_THROTTLE_MS,
    CancellationCheck,
    ThrottleRegistry,
    Throttler,
)


def encode_address(address: str) -> str:
    """URL-encode an address for use as a query parameter value."""
    return quote_plus(address, encoding="utf-8")


def parse_throttle(config: Mapping[str, Any], key: str) -> int:
    """Read a throttle setting in milliseconds, defaulting to 5 seconds."""
    value = config.get(key)
    if value is None or value == "":
        return DEFAULT_THROTTLE_MS
    try:
        return int(str(value).strip())
    except ValueError:
        raise InvalidConfigurationError(f"Invalid '{key}' throttle value: {value!r}") from None


class GeocodingStrategy(ABC):
    """Abstract base class for geocoding service providers.

    Each implementation owns its provider-specific logic:
    - URL construction and credentials
    - Throttling (through a Throttler shared per provider kind)
    - Response parsing and quota/error detection

    ``geocode`` throttles, fetches and checks the shape of the response and
    of every record it keeps when it is called; coordinates are then
    converted lazily as the caller iterates.

    Args:
        config: Provider settings with the ``spatial.geocode`` prefix stripped
            (``osm.throttle``, ``google.key``, ...).
        cancellation_check: Returns a termination reason once the calling
            context has been cancelled.
        registry: Where throttle state is shared; the process-wide registry
            by default.
        fetch: Loads and decodes JSON from a URL.
        logger: Logger for outbound URLs and fetch failures.
    """

    #: Key of the shared throttle state for this provider kind.
    throttle_key = ""

    def __init__(
        self,
        config: Mapping[str, Any],
        cancellation_check: Optional[CancellationCheck] = None,
        registry: Optional[ThrottleRegistry] = None,
        fetch: JsonFetcher = load_json,
        logger: Optional[logging.Logger] = None,
        clock: Optional[Callable[[], float]] = None,
        sleeper: Optional[Callable[[float], None]] = None,
    ) -> None:
        self.config = config
        self.fetch = fetch
        self.logger = logger if logger is not None else logging.getLogger(__name__)
        registry = registry if registry is not None else DEFAULT_REGISTRY
        throttle_kwargs = {}
        if clock is not None:
            throttle_kwargs["clock"] = clock
        if sleeper is not None:
            throttle_kwargs["sleeper"] = sleeper
        self.throttler = Throttler(
            parse_throttle(config, self.config_key("throttle")),
            cancellation_check,
            registry.state_for(self.throttle_key),
            logger=self.logger,
            **throttle_kwargs,
        )

    @abstractmethod
    def config_key(self, name: str) -> str:
        """Return the full settings key for ``name`` in this provider's namespace."""

    @abstractmethod
    def geocode(self, address: str, max_results: int) -> Iterator[GeocodeResult]:
        """Geocode an address.

        Args:
            address: Free-form address to look up.
            max_results: Upper bound on the number of results produced.

        Returns:
            Iterator over at most ``max_results`` normalized results.
        """

    @abstractmethod
    def get_source_name(self) -> str:
        """Get the provider name used in logs and errors."""

    def get_rate_limit_delay(self) -> float:
        """Get the enforced delay between requests in seconds."""
        return self.throttler.throttle_ms / 1000.0

    def secrets(self) -> List[str]:
        """Credentials that must not appear in logged URLs."""
        return []

    def redact(self, url: str) -> str:
        for secret in self.secrets():
            if secret:
                url = url.replace(secret, "***")
        return url

    def _load(self, url: str) -> FetchResult:
        self.logger.info("spatial.geocode: %s", self.redact(url))
        return load_json_try_twice(url, self.fetch, self.logger)

    @staticmethod
    def _limit(
        records: Iterable[Any],
        max_results: int,
        check: Callable[[Any], Mapping[str, Any]],
        convert: Callable[[Mapping[str, Any]], GeocodeResult],
    ) -> Iterator[GeocodeResult]:
        """Truncate to max_results, check every kept record, then convert lazily.

        A malformed record fails the whole call before any result is produced.
        """
        checked = [check(record) for record in itertools.islice(records, max_results)]
        return map(convert, checked)

    @staticmethod
    def _require_mapping(record: Any) -> Mapping[str, Any]:
        if not isinstance(record, Mapping):
            raise UnparseableResponseError(record)
        return record
