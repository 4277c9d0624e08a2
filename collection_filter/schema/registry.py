"""Master registry of built-in collections and transforms.

The registry is read from the bundled data/metadata.yaml the first time it is
needed and cached for the life of the process.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from dataclasses import field
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from ..errors import CollectionFilterError
from ..errors import MetadataError
from ..transformer import Provider
from ..transformer import Providers
from .collection import CollectionSchema
from .collection import Schemas
from .collection import SchemasBuilder

logger = logging.getLogger(__name__)

BUILTIN_METADATA_PATH = Path(__file__).parent.parent / "data" / "metadata.yaml"


@dataclass
class Metadata:
    """Collections and transforms known to the system."""

    collections: Schemas = field(default_factory=Schemas)
    transforms: Providers = field(default_factory=Providers)

    def kube_collections(self) -> Schemas:
        return self.collections.kube_collections()


def parse_metadata(text: str) -> Metadata:
    """Parse registry metadata from YAML text.

    Format:
    ```
    collections:
      - name: k8s/core/v1/pods
        resource: {group: "", version: v1, kind: Pod, plural: pods}
    transforms:
      - name: serviceentry
        inputs: [k8s/core/v1/pods]
        outputs: [istio/networking/v1alpha3/synthetic/serviceentries]
    ```

    Raises:
        MetadataError: If the YAML is malformed, an entry is invalid, or a
            collection name is repeated
    """
    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise MetadataError(f"Invalid metadata YAML: {e}") from e

    if not isinstance(data, dict):
        raise MetadataError("Metadata must be a mapping with 'collections' and 'transforms'")

    builder = SchemasBuilder()
    for index, entry in enumerate(data.get("collections") or []):
        try:
            builder.add(CollectionSchema.model_validate(entry))
        except (ValidationError, CollectionFilterError) as e:
            raise MetadataError(f"Invalid collection entry #{index}: {e}") from e

    transforms = Providers()
    for index, entry in enumerate(data.get("transforms") or []):
        if not isinstance(entry, dict):
            raise MetadataError(f"Invalid transform entry #{index}: expected a mapping")
        try:
            transforms.append(Provider.from_dict(entry))
        except ValidationError as e:
            raise MetadataError(f"Invalid transform entry #{index}: {e}") from e

    metadata = Metadata(collections=builder.build(), transforms=transforms)
    _warn_unknown_transform_names(metadata)
    return metadata


def _warn_unknown_transform_names(metadata: Metadata) -> None:
    known = set(metadata.collections.collection_names())
    for name in sorted((metadata.transforms.inputs() | metadata.transforms.outputs()) - known):
        logger.warning(f"Transform references unknown collection: {name}")


def load_metadata(path: Path) -> Metadata:
    """Load registry metadata from a YAML file."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise MetadataError(f"Cannot read metadata file {path}: {e}") from e
    metadata = parse_metadata(text)
    logger.debug(
        f"Loaded {len(metadata.collections)} collections and "
        f"{len(metadata.transforms)} transforms from {path}"
    )
    return metadata


# Cached built-in registry
_builtin: Metadata | None = None


def must_get() -> Metadata:
    """Return the built-in registry, loading it on first use.

    Raises:
        MetadataError: If the bundled metadata is malformed
    """
    global _builtin
    if _builtin is None:
        _builtin = load_metadata(BUILTIN_METADATA_PATH)
    return _builtin


def reset_cache() -> None:
    """Forget the cached built-in registry."""
    global _builtin
    _builtin = None


def describe(metadata: Metadata) -> dict[str, Any]:
    """Summarize a registry for display."""
    return {
        "collections": len(metadata.collections),
        "kube_collections": len(metadata.kube_collections()),
        "kinds": len(metadata.collections.kinds()),
        "transforms": len(metadata.transforms),
    }
