"""
Helpers for pulling coordinates and descriptions out of provider records.

Provider responses are loosely structured: the same value can sit under
several key names, and coordinates may be nested one or two levels deep.
Nothing here assumes a schema; every lookup is optional.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

FORMATTED_KEYS = ("formatted", "formatted_address", "address", "description", "display_name")
LAT_KEYS = ("lat", "latitude")
LNG_KEYS = ("lng", "longitude", "lon")


def as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def to_float(value: Any) -> Optional[float]:
    """Convert a number or numeric string to float; anything else is None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(str(value).strip())
    except ValueError:
        return None


def find_first_entry(record: Mapping[str, Any], keys: Sequence[str]) -> str:
    """Return the value of the first key present in ``record``, as text."""
    for key in keys:
        if key in record:
            return as_text(record[key])
    return ""


def find_geometry(record: Mapping[str, Any]) -> Mapping[str, Any]:
    """
    Locate the mapping holding the coordinates of a record.

    Looks at ``geometry`` and then ``geometry.location``. Records without a
    ``geometry`` mapping carry their coordinates at the top level.
    """
    geometry = record.get("geometry")
    if not isinstance(geometry, Mapping):
        return record
    location = geometry.get("location")
    if isinstance(location, Mapping):
        return location
    return geometry


def first_float(record: Mapping[str, Any], keys: Sequence[str]) -> Optional[float]:
    for key in keys:
        if key in record:
            return to_float(record[key])
    return None


def normalize_record(record: Dict[str, Any]) -> Tuple[Optional[float], Optional[float], str]:
    """Extract (latitude, longitude, description) using the fallback key lists."""
    description = find_first_entry(record, FORMATTED_KEYS)
    location = find_geometry(record)
    return (
        first_float(location, LAT_KEYS),
        first_float(location, LNG_KEYS),
        description,
    )
