"""Transformer providers.

A Provider describes one transform step: the collections it reads (inputs)
and the collections it produces (outputs). Providers answers which input
collections are needed, directly or through intermediate transforms, to
produce a set of requested outputs.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from dataclasses import field
from typing import Any
from typing import Protocol

from pydantic import BaseModel
from pydantic import Field

logger = logging.getLogger(__name__)


class InputsProvider(Protocol):
    """Anything that can compute the upstream inputs of a set of outputs."""

    def required_inputs_for(self, names: Iterable[str]) -> set[str]: ...


@dataclass(frozen=True)
class Provider:
    """A single transform step.

    Attributes:
        inputs: Names of the collections the transform reads
        outputs: Names of the collections the transform produces
        name: Optional label used in logs and CLI output
    """

    inputs: frozenset[str] = field(default_factory=frozenset)
    outputs: frozenset[str] = field(default_factory=frozenset)
    name: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Provider:
        """Build a provider from a transform mapping.

        Raises:
            pydantic.ValidationError: If inputs or outputs are not lists of names
        """
        return TransformConfig.model_validate(data).to_provider()

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"inputs": sorted(self.inputs), "outputs": sorted(self.outputs)}
        if self.name:
            result["name"] = self.name
        return result


class TransformConfig(BaseModel):
    """A transform as declared in metadata or settings."""

    name: str = Field(default="", description="Label for the transform")
    inputs: list[str] = Field(default_factory=list, description="Collections the transform reads")
    outputs: list[str] = Field(default_factory=list, description="Collections the transform produces")

    def to_provider(self) -> Provider:
        return Provider(inputs=frozenset(self.inputs), outputs=frozenset(self.outputs), name=self.name)


class Providers(list[Provider]):
    """An ordered list of transform providers."""

    def inputs(self) -> set[str]:
        """Return every collection read by any provider."""
        result: set[str] = set()
        for provider in self:
            result |= provider.inputs
        return result

    def outputs(self) -> set[str]:
        """Return every collection produced by any provider."""
        result: set[str] = set()
        for provider in self:
            result |= provider.outputs
        return result

    def required_inputs_for(self, names: Iterable[str] | None) -> set[str]:
        """Return the inputs the named outputs transitively depend on.

        A provider producing any wanted collection contributes its inputs to
        the result, and those inputs become wanted in turn, until nothing new
        is added. Names no provider produces contribute nothing.

        Args:
            names: Output collection names

        Returns:
            Set of input collection names (empty if nothing is required)
        """
        requested = set(names or ())
        wanted = set(requested)
        required: set[str] = set()
        pending = set(requested)
        while pending:
            name = pending.pop()
            for provider in self:
                if name not in provider.outputs:
                    continue
                for input_name in provider.inputs - required:
                    required.add(input_name)
                    if input_name not in wanted:
                        wanted.add(input_name)
                        pending.add(input_name)

        logger.debug(f"Resolved {len(required)} upstream inputs for {len(requested)} outputs")
        return required
