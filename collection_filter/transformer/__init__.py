"""Transformer graph used to compute upstream collections."""

from .providers import InputsProvider
from .providers import Provider
from .providers import Providers
from .providers import TransformConfig

__all__ = [
    "InputsProvider",
    "Provider",
    "Providers",
    "TransformConfig",
]
