"""Resources domain - Crossplane resource discovery."""

from crossplane_ai.domains.resources.classifier import classify
from crossplane_ai.domains.resources.client import (
    ResourceClient,
    connect_cluster,
    restrict_catalog,
)
from crossplane_ai.domains.resources.crds import CrossplaneCRDs

__all__ = [
    "CrossplaneCRDs",
    "ResourceClient",
    "classify",
    "connect_cluster",
    "restrict_catalog",
]
