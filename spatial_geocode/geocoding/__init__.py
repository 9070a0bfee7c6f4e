"""Geocoding strategies for different providers."""

from .errors import (
    GeocodingError,
    InvalidConfigurationError,
    ProviderQuotaError,
    UnparseableResponseError,
)
from .google_maps import GoogleMapsStrategy
from .nominatim import NominatimStrategy
from .result import GeocodeResult
from .strategy import GeocodingStrategy
from .templated import TemplatedStrategy
from .throttle import ThrottleRegistry, Throttler

__all__ = [
    "GeocodingStrategy",
    "NominatimStrategy",
    "GoogleMapsStrategy",
    "TemplatedStrategy",
    "GeocodeResult",
    "Throttler",
    "ThrottleRegistry",
    "GeocodingError",
    "InvalidConfigurationError",
    "ProviderQuotaError",
    "UnparseableResponseError",
]
