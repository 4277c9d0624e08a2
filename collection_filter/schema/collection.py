"""Collection schemas and schema sets.

A CollectionSchema binds a unique collection name to the resource type it
holds. Schemas is a read-only set of collection schemas keyed by name, built
with a SchemasBuilder.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from collections.abc import Iterable
from collections.abc import Iterator

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import field_validator

from ..errors import CollectionNotFoundError
from ..errors import DuplicateCollectionError
from ..errors import InvalidCollectionNameError
from .resource import ResourceSchema

_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9_][a-zA-Z0-9_.]*(/[a-zA-Z0-9_][a-zA-Z0-9_.]*)*$")

KUBE_PREFIX = "k8s/"


def is_valid_name(name: str) -> bool:
    """Return True if name is a valid '/'-separated collection name."""
    return bool(_NAME_PATTERN.match(name))


class CollectionSchema(BaseModel):
    """Immutable descriptor of one collection."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Unique collection name, e.g. 'k8s/core/v1/pods'")
    resource: ResourceSchema
    disabled: bool = Field(default=False, description="Whether the collection is disabled")

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        if not is_valid_name(value):
            raise InvalidCollectionNameError(value)
        return value

    @property
    def group(self) -> str:
        return self.resource.group

    @property
    def kind(self) -> str:
        return self.resource.kind

    @property
    def is_kube(self) -> bool:
        return self.name.startswith(KUBE_PREFIX)

    def disable(self) -> CollectionSchema:
        """Return a disabled copy of this schema."""
        if self.disabled:
            return self
        return self.model_copy(update={"disabled": True})

    def __str__(self) -> str:
        suffix = " (disabled)" if self.disabled else ""
        return f"{self.name} [{self.resource}]{suffix}"


class Schemas:
    """Read-only set of collection schemas keyed by name.

    Iteration follows insertion order. Callers should not depend on it.
    """

    def __init__(self, by_name: dict[str, CollectionSchema] | None = None):
        self._by_name: dict[str, CollectionSchema] = dict(by_name or {})

    # ----- Enumeration -----

    def all(self) -> list[CollectionSchema]:
        """Return every schema in the set."""
        return list(self._by_name.values())

    def __iter__(self) -> Iterator[CollectionSchema]:
        return iter(self._by_name.values())

    def __len__(self) -> int:
        return len(self._by_name)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Schemas):
            return NotImplemented
        return self._by_name == other._by_name

    def __repr__(self) -> str:
        return f"Schemas({self.collection_names()})"

    # ----- Lookup -----

    def find(self, name: str) -> CollectionSchema | None:
        """Return the schema with the given name, or None."""
        return self._by_name.get(name)

    def must_find(self, name: str) -> CollectionSchema:
        """Return the schema with the given name.

        Raises:
            CollectionNotFoundError: If no schema has that name
        """
        schema = self._by_name.get(name)
        if schema is None:
            raise CollectionNotFoundError(name)
        return schema

    def find_by_group_kind(self, group: str, kind: str) -> CollectionSchema | None:
        """Return the first schema holding resources of group/kind, or None."""
        for schema in self._by_name.values():
            if schema.group == group and schema.kind == kind:
                return schema
        return None

    def collection_names(self) -> list[str]:
        return sorted(self._by_name)

    def kinds(self) -> list[str]:
        return sorted({schema.kind for schema in self._by_name.values()})

    def disabled_collection_names(self) -> list[str]:
        return sorted(name for name, schema in self._by_name.items() if schema.disabled)

    # ----- Derived sets -----

    def select(self, predicate: Callable[[CollectionSchema], bool]) -> Schemas:
        """Return a new set with the schemas matching predicate."""
        return Schemas({name: s for name, s in self._by_name.items() if predicate(s)})

    def enabled(self) -> Schemas:
        return self.select(lambda s: not s.disabled)

    def disabled(self) -> Schemas:
        return self.select(lambda s: s.disabled)

    def kube_collections(self) -> Schemas:
        """Return the collections sourced from Kubernetes ('k8s/' names)."""
        return self.select(lambda s: s.is_kube)

    def union(self, other: Schemas) -> Schemas:
        """Return a set holding the schemas of both sets.

        Raises:
            DuplicateCollectionError: If a name is present in both sets
        """
        builder = SchemasBuilder()
        for schema in self:
            builder.add(schema)
        for schema in other:
            builder.add(schema)
        return builder.build()

    def remove(self, *names: str) -> Schemas:
        """Return a new set without the named schemas. Unknown names are ignored."""
        dropped = set(names)
        return self.select(lambda s: s.name not in dropped)


class SchemasBuilder:
    """Accumulates collection schemas into a Schemas set.

    Usage:
        builder = SchemasBuilder()
        builder.add(schema)
        schemas = builder.build()
    """

    def __init__(self) -> None:
        self._by_name: dict[str, CollectionSchema] = {}

    def add(self, schema: CollectionSchema) -> None:
        """Add a schema.

        Raises:
            DuplicateCollectionError: If a schema with the same name was already added
        """
        if schema.name in self._by_name:
            raise DuplicateCollectionError(schema.name)
        self._by_name[schema.name] = schema

    def must_add(self, schema: CollectionSchema) -> SchemasBuilder:
        """Add a schema known to be unique; returns the builder for chaining."""
        self.add(schema)
        return self

    def add_all(self, schemas: Iterable[CollectionSchema]) -> SchemasBuilder:
        for schema in schemas:
            self.add(schema)
        return self

    def build(self) -> Schemas:
        return Schemas(self._by_name)
