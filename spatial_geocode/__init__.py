"""Address geocoding through configurable external providers."""

from .config import Configuration
from .procedures import MAX_RESULTS, Geocode

__all__ = ["Configuration", "Geocode", "MAX_RESULTS"]
