"""Pydantic models shared across Crossplane AI domains."""

from crossplane_ai.models.common import ResourceRecord, ResourceStatus

__all__ = ["ResourceRecord", "ResourceStatus"]
