"""Filtering of Kubernetes-sourced collections."""

from .resources import default_excluded_resource_kinds
from .resources import disable_excluded_collections
from .resources import is_default_excluded
from .resources import is_required_for_service_discovery

__all__ = [
    "default_excluded_resource_kinds",
    "disable_excluded_collections",
    "is_default_excluded",
    "is_required_for_service_discovery",
]
