"""
Exception types raised by the catalog core.
"""


class CatalogError(Exception):
    """Base class for catalog errors."""


class QuotaExceededError(CatalogError):
    """A write would take the key-value store past its capacity."""

    def __init__(self, key: str, needed: int, capacity: int):
        self.key = key
        self.needed = needed
        self.capacity = capacity
        super().__init__(
            f"Writing '{key}' needs {needed} bytes, capacity is {capacity} bytes"
        )


class ProviderError(CatalogError):
    """The text-generation provider could not be reached or refused the request."""
