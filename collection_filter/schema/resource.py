"""Resource type descriptors.

A ResourceSchema identifies one kind of configuration resource by its API
group, version and kind. The empty group is the core group.
"""

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field


class ResourceSchema(BaseModel):
    """Immutable descriptor of a resource type."""

    model_config = ConfigDict(frozen=True)

    group: str = Field(default="", description="API group (empty for the core group)")
    version: str = Field(default="v1", description="API version")
    kind: str = Field(..., description="Resource kind, e.g. 'Pod'")
    plural: str = Field(default="", description="Plural resource name, e.g. 'pods'")

    @property
    def group_version(self) -> str:
        if not self.group:
            return self.version
        return f"{self.group}/{self.version}"

    def __str__(self) -> str:
        return f"{self.group_version}/{self.kind}"
