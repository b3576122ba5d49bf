"""Kubernetes client wrappers."""

from crossplane_ai.clients.base import CRDDefinition, K8sClient

__all__ = ["CRDDefinition", "K8sClient"]
