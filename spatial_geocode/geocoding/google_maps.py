"""Google Maps geocoding strategy implementation."""

from typing import Any, Iterator, List, Mapping

from .errors import ProviderQuotaError, UnparseableResponseError
from .normalize import as_text, to_float
from .result import GeocodeResult
from .strategy import GeocodingStrategy, encode_address


class GoogleMapsStrategy(GeocodingStrategy):
    """Geocoding strategy using Google Maps Geocoding API.

    Credentials are taken from settings, first match wins:
    - ``google.client`` and ``google.signature`` (Maps for Work)
    - ``google.key`` (API key)
    - neither: the keyless free tier, which Google heavily rate limits

    See: https://developers.google.com/maps/documentation/geocoding
    """

    BASE_URL = "https://maps.googleapis.com/maps/api/geocode/json"

    throttle_key = "google"

    def __init__(self, config: Mapping[str, Any], **kwargs: Any) -> None:
        super().__init__(config, **kwargs)
        self.base_url = f"{self.BASE_URL}?{self.credentials()}&address="

    def credentials(self) -> str:
        """Build the authentication part of the query string."""
        client = self.config.get("google.client")
        signature = self.config.get("google.signature")
        if client is not None and signature is not None:
            return f"client={client}&signature={signature}"
        key = self.config.get("google.key")
        if key is not None:
            return f"key={key}"
        return "auth=free"

    def config_key(self, name: str) -> str:
        return f"google.{name}"

    def secrets(self) -> List[str]:
        values = (self.config.get("google.key"), self.config.get("google.signature"))
        return [value for value in values if value]

    def get_source_name(self) -> str:
        """Get the provider name.

        Returns:
            'google'
        """
        return "google"

    def geocode(self, address: str, max_results: int) -> Iterator[GeocodeResult]:
        """Geocode an address using Google Maps API.

        An empty address returns no results without calling the service.
        """
        if not address:
            return iter(())
        self.throttler.wait_for_throttle()
        value = self._load(self.base_url + encode_address(address)).value
        if isinstance(value, Mapping):
            results = value.get("results")
            if isinstance(results, list):
                if not results and "error_message" in value:
                    raise ProviderQuotaError("Google", as_text(value["error_message"]))
                return self._limit(results, max_results, self._check_record, self._to_result)
        raise UnparseableResponseError(value)

    def _check_record(self, record: Any) -> Mapping[str, Any]:
        record = self._require_mapping(record)
        geometry = record.get("geometry")
        location = geometry.get("location") if isinstance(geometry, Mapping) else None
        if not isinstance(location, Mapping):
            raise UnparseableResponseError(record)
        return record

    def _to_result(self, record: Mapping[str, Any]) -> GeocodeResult:
        location = record["geometry"]["location"]
        return GeocodeResult(
            to_float(location.get("lat")),
            to_float(location.get("lng")),
            as_text(record.get("formatted_address")),
            record,
        )
