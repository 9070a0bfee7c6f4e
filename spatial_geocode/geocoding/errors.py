"""Exceptions raised by geocoding strategies."""

from typing import Any


class GeocodingError(Exception):
    """Base class for all geocoding failures surfaced to callers."""


class InvalidConfigurationError(GeocodingError, ValueError):
    """A provider is missing a required setting (URL template, key, ...)."""


class ProviderQuotaError(GeocodingError):
    """The provider reported a quota or service error in its response body.

    Args:
        provider: Name of the provider that reported the error.
        message: The provider's own status or error message.
    """

    def __init__(self, provider: str, message: str) -> None:
        self.provider = provider
        self.message = message
        super().__init__(f"{provider}: {message}")


class UnparseableResponseError(GeocodingError):
    """The response did not have any of the shapes the provider can return."""

    def __init__(self, value: Any) -> None:
        self.value = value
        super().__init__(f"Can't parse geocoding results {value!r}")
