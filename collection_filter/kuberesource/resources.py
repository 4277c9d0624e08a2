"""Disable collections that are excluded or not needed.

Builtin Kubernetes kinds are excluded by default. When service discovery is
enabled, the kinds it depends on are re-enabled. Independently, any
collection that is not an input of the required outputs is disabled.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from collections.abc import Sequence

from ..schema import CollectionSchema
from ..schema import ResourceSchema
from ..schema import Schemas
from ..schema import SchemasBuilder
from ..schema import must_get
from ..transformer import InputsProvider

logger = logging.getLogger(__name__)


def disable_excluded_collections(
    schemas: Schemas | None,
    providers: InputsProvider,
    required_collections: Iterable[str] | None,
    excluded_kinds: Sequence[str] | None,
    enable_service_discovery: bool,
) -> Schemas:
    """Return a copy of schemas with unneeded collections disabled.

    A collection is disabled if its kind is excluded (unless service discovery
    is enabled and needs it), or if it is not upstream of the required
    collections. The upstream check always wins over the service discovery
    override. Collections are never added or removed.

    Args:
        schemas: Collections to filter (None behaves as empty)
        providers: Transformer providers used to find upstream inputs
        required_collections: Output collections that must be produced
        excluded_kinds: Resource kinds to exclude (exact, case-sensitive)
        enable_service_discovery: Whether service discovery kinds are needed

    Returns:
        New Schemas with the same names, some of them disabled
    """
    excluded_kinds = excluded_kinds or []

    # Required collections name transformer outputs; what we keep are their inputs.
    upstream = providers.required_inputs_for(required_collections or [])

    builder = SchemasBuilder()
    for s in schemas or Schemas():
        disabled = False
        if _is_kind_excluded(excluded_kinds, s.kind):
            disabled = True

            if enable_service_discovery and is_required_for_service_discovery(s):
                logger.debug(f"Keeping excluded collection {s.name}: required for service discovery")
                disabled = False

        if s.name not in upstream:
            disabled = True

        if disabled:
            s = s.disable()

        builder.add(s)

    result = builder.build()
    logger.debug(f"Disabled {len(result.disabled())} of {len(result)} collections")
    return result


def default_excluded_resource_kinds() -> list[str]:
    """Return the resource kinds excluded by default.

    Kinds follow the order of the built-in registry.
    """
    return [s.kind for s in must_get().kube_collections() if is_default_excluded(s)]


def _is_kind_excluded(excluded_kinds: Sequence[str], kind: str) -> bool:
    for excluded_kind in excluded_kinds:
        if kind == excluded_kind:
            return True
    return False


# Core kinds that service discovery reads from the API server.
_KNOWN_TYPES = frozenset(
    {
        "Service",
        "Namespace",
        "Node",
        "Pod",
        "Secret",
    }
)


def _types_key(group: str, kind: str) -> str:
    if not group:
        return kind
    return f"{group}/{kind}"


def is_required_for_service_discovery(resource: ResourceSchema | CollectionSchema) -> bool:
    """Return True if service discovery needs this resource kind."""
    return _types_key(resource.group, resource.kind) in _KNOWN_TYPES


def is_default_excluded(resource: ResourceSchema | CollectionSchema) -> bool:
    """Return True if this resource kind is excluded by default.

    Shares the service discovery table for now.
    """
    return is_required_for_service_discovery(resource)
