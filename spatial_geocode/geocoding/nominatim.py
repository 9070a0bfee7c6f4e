from typing import Any, Iterator, Mapping

from .errors import UnparseableResponseError
from .normalize import as_text, to_float
from .result import GeocodeResult
from .strategy import GeocodingStrategy, encode_address


class NominatimStrategy(GeocodingStrategy):
    """
    OpenStreetMap (Nominatim) geocoding strategy.

    Design philosophy:
    - No credentials, one fixed endpoint
    - Respect the public usage policy through ``osm.throttle``
    - Trust Nominatim's ranking; take results in the order returned
    """

    OSM_URL = "https://nominatim.openstreetmap.org/search?format=json&q="

    throttle_key = "osm"

    def config_key(self, name: str) -> str:
        return f"osm.{name}"

    def get_source_name(self) -> str:
        return "osm"

    # ------------------------------------------------------------------
    # Core geocode method
    # ------------------------------------------------------------------

    def geocode(self, address: str, max_results: int) -> Iterator[GeocodeResult]:
        self.throttler.wait_for_throttle()
        loaded = self._load(self.OSM_URL + encode_address(address))
        if loaded.degraded:
            return iter(())
        if not isinstance(loaded.value, list):
            raise UnparseableResponseError(loaded.value)
        return self._limit(loaded.value, max_results, self._require_mapping, self._to_result)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _to_result(self, record: Mapping[str, Any]) -> GeocodeResult:
        """Nominatim records carry lat/lon as strings at the top level."""
        return GeocodeResult(
            to_float(record.get("lat")),
            to_float(record.get("lon")),
            as_text(record.get("display_name")),
            record,
        )
