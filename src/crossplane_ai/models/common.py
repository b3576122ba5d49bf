"""Common Pydantic models shared across Crossplane AI domains."""

import copy
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ResourceStatus(str, Enum):
    """Readiness derived from a resource's status payload."""

    READY = "Ready"
    NOT_READY = "NotReady"
    UNKNOWN = "Unknown"


class ResourceRecord(BaseModel):
    """Normalized view of one discovered Crossplane resource.

    Records are rebuilt from the live API response on every discovery
    pass and are immutable once created. ``labels`` and ``raw_spec`` are
    deep copies taken at construction, so the source object can change
    without affecting the record. They are still plain dicts: freezing
    stops reassignment, not in-place edits, and callers must treat them
    as read-only.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Resource name")
    namespace: str = Field("", description="Resource namespace (empty when cluster-scoped)")
    kind: str = Field(..., description="Resource plural, e.g. 'dbinstances'")
    provider: str = Field("unknown", description="Cloud provider inferred from the API group")
    status: ResourceStatus = Field(ResourceStatus.UNKNOWN, description="Readiness")
    age: str = Field("", description="Time since creation, e.g. '3h5m'")
    labels: dict[str, str] = Field(default_factory=dict, description="Resource labels")
    raw_spec: dict[str, Any] = Field(default_factory=dict, description="Uninterpreted spec")

    @field_validator("labels", "raw_spec")
    @classmethod
    def _detach(cls, value: dict[str, Any]) -> dict[str, Any]:
        return copy.deepcopy(value)

    @property
    def is_ready(self) -> bool:
        """Check if the resource reports Ready."""
        return self.status == ResourceStatus.READY

    def to_summary_dict(self) -> dict[str, Any]:
        """Compact representation used as completion-service context."""
        return {
            "name": self.name,
            "namespace": self.namespace,
            "kind": self.kind,
            "provider": self.provider,
            "status": self.status.value,
            "age": self.age,
        }
