"""Exception types raised by collection-filter.

The filter itself never raises for well-formed input. These errors come from
building schema sets, loading registry metadata and reading settings.
"""


class CollectionFilterError(Exception):
    """Base class for collection-filter errors."""


class DuplicateCollectionError(CollectionFilterError):
    """Raised when a schema set already holds a collection with the same name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"collection already exists: {name}")


class CollectionNotFoundError(CollectionFilterError, KeyError):
    """Raised by lookups that require the collection to exist."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(name)

    def __str__(self) -> str:
        return f"collection not found: {self.name}"


class InvalidCollectionNameError(CollectionFilterError):
    """Raised when a collection name is not a valid '/'-separated path."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"invalid collection name: {name!r}")


class MetadataError(CollectionFilterError):
    """Raised when registry metadata cannot be parsed."""


class SettingsError(CollectionFilterError):
    """Raised when settings are present but invalid."""
