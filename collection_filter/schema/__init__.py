"""Collection and resource schemas plus the built-in registry."""

from .collection import CollectionSchema
from .collection import Schemas
from .collection import SchemasBuilder
from .registry import Metadata
from .registry import load_metadata
from .registry import must_get
from .registry import parse_metadata
from .resource import ResourceSchema

__all__ = [
    "CollectionSchema",
    "Metadata",
    "ResourceSchema",
    "Schemas",
    "SchemasBuilder",
    "load_metadata",
    "must_get",
    "parse_metadata",
]
