"""
Geocoding procedures exposed to the host database.

``Geocode.geocode`` and ``Geocode.geocode_once`` pick the provider named by
``spatial.geocode.provider`` each time they are called, so configuration
changes take effect on the next lookup. Throttle state outlives the
strategies through the shared ThrottleRegistry.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterator, Optional

from .config import Configuration
from .geocoding import (
    GeocodeResult,
    GeocodingStrategy,
    GoogleMapsStrategy,
    NominatimStrategy,
    TemplatedStrategy,
)
from .geocoding.fetch import JsonFetcher, load_json
from .geocoding.throttle import CancellationCheck, ThrottleRegistry

MAX_RESULTS = 100
PREFIX = "spatial.geocode"
GEOCODE_PROVIDER_KEY = "provider"


def clamp_max_results(max_results: int) -> int:
    """0 asks for as many results as allowed; anything else is kept in [1, 100]."""
    if max_results == 0:
        return MAX_RESULTS
    return min(max(max_results, 1), MAX_RESULTS)


class Geocode:
    """Provider selection and the two public geocoding operations.

    Args:
        config: Process-wide settings; only keys under ``spatial.geocode``
            are read.
        cancellation_check: Reports the calling transaction's termination
            reason, if any.
        registry: Shared throttle state; the process-wide one by default.
        fetch: HTTP+JSON primitive handed to the strategies.
    """

    def __init__(
        self,
        config: Configuration,
        cancellation_check: Optional[CancellationCheck] = None,
        registry: Optional[ThrottleRegistry] = None,
        fetch: JsonFetcher = load_json,
        logger: Optional[logging.Logger] = None,
        clock: Optional[Callable[[], float]] = None,
        sleeper: Optional[Callable[[float], None]] = None,
    ) -> None:
        self.config = config
        self.strategy_kwargs: Dict[str, Any] = {
            "cancellation_check": cancellation_check,
            "registry": registry,
            "fetch": fetch,
            "logger": logger if logger is not None else logging.getLogger(__name__),
            "clock": clock,
            "sleeper": sleeper,
        }

    def get_strategy(self) -> GeocodingStrategy:
        active_config = self.config.namespace(PREFIX)
        provider = active_config.get(GEOCODE_PROVIDER_KEY)
        if provider is None:
            return NominatimStrategy(active_config, **self.strategy_kwargs)
        provider = provider.lower()
        if provider == "google":
            return GoogleMapsStrategy(active_config, **self.strategy_kwargs)
        if provider == "osm":
            return NominatimStrategy(active_config, **self.strategy_kwargs)
        return TemplatedStrategy(active_config, provider, **self.strategy_kwargs)

    def geocode(self, address: str, max_results: int) -> Iterator[GeocodeResult]:
        """Look up the geographic location of an address."""
        strategy = self.get_strategy()
        strategy.logger.debug(
            "spatial.geocode: using %s, %.1fs between calls",
            strategy.get_source_name(),
            strategy.get_rate_limit_delay(),
        )
        return strategy.geocode(address, clamp_max_results(max_results))

    def geocode_once(self, address: str) -> Iterator[GeocodeResult]:
        """Look up the single best location of an address."""
        return self.geocode(address, 1)
