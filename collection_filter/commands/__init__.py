"""CLI command groups for collection-filter."""

__all__ = [
    "collections",
]
