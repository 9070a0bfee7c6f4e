"""
Read-only configuration for geocoding lookups.

Settings are flat dotted keys, e.g. ``spatial.geocode.provider`` or
``spatial.geocode.google.key``. Loading them from a file is left to the host;
this class only answers lookups.
"""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, Mapping, Optional


class Configuration(Mapping[str, str]):
    """Immutable mapping of dotted setting keys to string values."""

    def __init__(self, settings: Optional[Mapping[str, object]] = None) -> None:
        self._settings: Dict[str, str] = {
            str(key): str(value) for key, value in (settings or {}).items() if value is not None
        }

    @classmethod
    def from_pairs(cls, pairs: Iterable[str]) -> "Configuration":
        """Build from ``key=value`` strings, as given on a command line."""
        settings = {}
        for pair in pairs:
            key, sep, value = pair.partition("=")
            if not sep or not key.strip():
                raise ValueError(f"Expected key=value, got {pair!r}")
            settings[key.strip()] = value.strip()
        return cls(settings)

    def __getitem__(self, key: str) -> str:
        return self._settings[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._settings)

    def __len__(self) -> int:
        return len(self._settings)

    def namespace(self, prefix: str) -> Dict[str, str]:
        """Return every setting under ``prefix`` with the prefix removed."""
        prefix = prefix.rstrip(".") + "."
        return {
            key[len(prefix):]: value
            for key, value in self._settings.items()
            if key.startswith(prefix)
        }

    def merged(self, overrides: Mapping[str, object]) -> "Configuration":
        settings: Dict[str, object] = dict(self._settings)
        settings.update(overrides)
        return Configuration(settings)
