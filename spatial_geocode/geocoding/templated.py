"""Geocoding against any provider described by a URL template."""

from __future__ import annotations

from typing import Any, Iterator, List, Mapping, Optional

from .errors import InvalidConfigurationError, ProviderQuotaError, UnparseableResponseError
from .normalize import normalize_record
from .result import GeocodeResult
from .strategy import GeocodingStrategy, encode_address

PLACE_TOKEN = "PLACE"
KEY_TOKEN = "KEY"

OVER_QUERY_LIMIT = "OVER_QUERY_LIMIT"
QUOTA_EXCEEDED = "quota exceeded"


class TemplatedStrategy(GeocodingStrategy):
    """
    Geocoding strategy for a user-configured HTTP+JSON provider.

    Settings (all under the provider's own name):
    - ``<provider>.url``: request URL; ``PLACE`` marks the encoded address and
      ``KEY`` the API key, e.g. ``https://api.opencagedata.com/geocode/v1/json?q=PLACE&key=KEY``
    - ``<provider>.key``: required only when the URL contains ``KEY``
    - ``<provider>.throttle``: milliseconds between calls (default 5000)

    The response may be a bare list of records or a map with a ``results``
    list; coordinates and descriptions are found through fallback key lists.
    """

    throttle_key = "templated"

    def __init__(self, config: Mapping[str, Any], provider: str, **kwargs: Any) -> None:
        self.provider = provider
        self.key: Optional[str] = None
        url_key = self.config_key("url")
        if config.get(url_key) is None:
            raise InvalidConfigurationError(f"Missing 'url' for geocode provider: {provider}")
        url_template = str(config[url_key])
        if PLACE_TOKEN not in url_template:
            raise InvalidConfigurationError(f"Missing 'PLACE' in url template: {url_template}")

        if KEY_TOKEN in url_template:
            key = config.get(self.config_key("key"))
            if key is None:
                raise InvalidConfigurationError(f"Missing 'key' for geocode provider: {provider}")
            self.key = str(key)
            url_template = url_template.replace(KEY_TOKEN, self.key)
        self.url_template = url_template

        super().__init__(config, **kwargs)

    def config_key(self, name: str) -> str:
        return f"{self.provider}.{name}"

    def get_source_name(self) -> str:
        return self.provider

    def secrets(self) -> List[str]:
        return [self.key] if self.key else []

    def build_url(self, address: str) -> str:
        return self.url_template.replace(PLACE_TOKEN, encode_address(address))

    def geocode(self, address: str, max_results: int) -> Iterator[GeocodeResult]:
        self.throttler.wait_for_throttle()
        value = self._load(self.build_url(address)).value
        return self._limit(self._records(value), max_results, self._require_mapping, self._to_result)

    def _records(self, value: Any) -> List[Any]:
        if isinstance(value, list):
            return value
        if isinstance(value, Mapping):
            results = value.get("results")
            if isinstance(results, list):
                if not results:
                    self._check_quota(value)
                return results
        raise UnparseableResponseError(value)

    def _check_quota(self, data: Mapping[str, Any]) -> None:
        status = data.get("status")
        if isinstance(status, str):
            if status == OVER_QUERY_LIMIT:
                raise ProviderQuotaError(self.provider, status)
        elif isinstance(status, Mapping):
            if str(status.get("message")) == QUOTA_EXCEEDED:
                raise ProviderQuotaError(self.provider, QUOTA_EXCEEDED)

    def _to_result(self, record: Mapping[str, Any]) -> GeocodeResult:
        lat, lng, description = normalize_record(record)
        return GeocodeResult(lat, lng, description, record)
