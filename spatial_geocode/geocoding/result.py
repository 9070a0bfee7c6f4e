"""Normalized geocoding result."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class GeocodeResult:
    """One location returned by a provider.

    Attributes:
        latitude: Latitude in degrees, None when the provider record had none.
        longitude: Longitude in degrees, None when the provider record had none.
        description: Human-readable address, empty string when missing.
        data: The untouched provider record.
    """

    latitude: Optional[float]
    longitude: Optional[float]
    description: str
    data: Dict[str, Any] = field(default_factory=dict)

    @property
    def location(self) -> Dict[str, Any]:
        return {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "description": self.description,
        }

    def to_record(self) -> Dict[str, Any]:
        """Return the record shape handed back to the host procedure layer."""
        return {
            "location": self.location,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "description": self.description,
            "data": self.data,
        }
