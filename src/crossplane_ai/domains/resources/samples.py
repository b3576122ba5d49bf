"""Embedded sample cluster used in mock mode.

Serves raw API objects through the same ``list_resources`` interface as
K8sClient so the whole discovery and classification path runs unchanged
without a cluster.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any

from crossplane_ai.clients.base import CRDDefinition, K8sClient
from crossplane_ai.domains.resources.crds import CrossplaneCRDs

if TYPE_CHECKING:
    from crossplane_ai.config import CrossplaneAIConfig

logger = logging.getLogger(__name__)

DEFAULT_SCENARIO = "default"


@dataclass
class SampleResource:
    """One sample object: identity, readiness and age."""

    name: str
    crd: CRDDefinition
    ready: bool | None = True
    age: timedelta = timedelta(hours=1)
    namespace: str | None = None
    labels: dict[str, str] = field(default_factory=dict)
    spec: dict[str, Any] = field(default_factory=dict)

    def to_object(self, now: datetime) -> dict[str, Any]:
        """Render as a raw API object, timestamped relative to ``now``."""
        metadata: dict[str, Any] = {
            "name": self.name,
            "creationTimestamp": (now - self.age).strftime("%Y-%m-%dT%H:%M:%SZ"),
            "labels": dict(self.labels),
        }
        if self.namespace:
            metadata["namespace"] = self.namespace

        conditions = [{"type": "Synced", "status": "True"}]
        if self.ready is not None:
            conditions.append({"type": "Ready", "status": "True" if self.ready else "False"})

        return {
            "apiVersion": self.crd.api_version,
            "kind": self.crd.kind,
            "metadata": metadata,
            "spec": dict(self.spec),
            "status": {"conditions": conditions},
        }


def _default_scenario() -> list[SampleResource]:
    crds = CrossplaneCRDs
    return [
        SampleResource(
            "sample-database-composition",
            crds.COMPOSITION,
            age=timedelta(hours=2),
            labels={"provider": "aws", "service": "rds"},
            spec={"compositeTypeRef": {"apiVersion": "example.org/v1alpha1", "kind": "XDatabase"}},
        ),
        SampleResource("xdatabases.example.org", crds.COMPOSITE_RESOURCE_DEFINITION, age=timedelta(hours=2)),
        SampleResource(
            "provider-aws",
            crds.PROVIDER,
            spec={"package": "xpkg.upbound.io/crossplane-contrib/provider-aws:v0.44.0"},
        ),
        SampleResource(
            "provider-gcp",
            crds.PROVIDER,
            spec={"package": "xpkg.upbound.io/crossplane-contrib/provider-gcp:v0.22.0"},
        ),
        SampleResource(
            "provider-azure",
            crds.PROVIDER,
            spec={"package": "xpkg.upbound.io/crossplane-contrib/provider-azure:v0.20.0"},
        ),
        SampleResource(
            "sample-database-instance",
            crds.AWS_DB_INSTANCE,
            age=timedelta(minutes=30),
            spec={"forProvider": {"region": "us-west-2", "dbInstanceClass": "db.t3.micro", "engine": "postgres"}},
        ),
        SampleResource(
            "web-server-instance",
            crds.AWS_INSTANCE,
            age=timedelta(minutes=45),
            spec={"forProvider": {"region": "us-west-2", "instanceType": "t3.micro"}},
        ),
        SampleResource(
            "data-storage-bucket",
            crds.AWS_BUCKET,
            spec={"forProvider": {"locationConstraint": "us-west-2"}},
        ),
        SampleResource("gcp-database-instance", crds.GCP_DATABASE_INSTANCE, age=timedelta(minutes=20)),
        SampleResource("azure-storage-account", crds.AZURE_STORAGE_ACCOUNT, age=timedelta(minutes=35)),
        SampleResource(
            "failing-test-resource",
            crds.AWS_INSTANCE,
            ready=False,
            age=timedelta(minutes=5),
            spec={"forProvider": {"region": "us-west-2", "instanceType": "t3.large"}},
        ),
    ]


def _healthy_scenario() -> list[SampleResource]:
    crds = CrossplaneCRDs
    return [
        SampleResource("web-app-db", crds.AWS_DB_INSTANCE, age=timedelta(hours=2)),
        SampleResource("web-app-server", crds.AWS_INSTANCE, age=timedelta(hours=2)),
        SampleResource("web-app-bucket", crds.AWS_BUCKET, age=timedelta(hours=2)),
    ]


def _mixed_health_scenario() -> list[SampleResource]:
    crds = CrossplaneCRDs
    return [
        SampleResource("healthy-db", crds.AWS_DB_INSTANCE),
        SampleResource("failing-server", crds.AWS_INSTANCE, ready=False, age=timedelta(minutes=30)),
        # Still provisioning: no Ready condition yet
        SampleResource("pending-bucket", crds.AWS_BUCKET, ready=None, age=timedelta(minutes=5)),
    ]


def _multi_cloud_scenario() -> list[SampleResource]:
    crds = CrossplaneCRDs
    return [
        SampleResource("aws-database", crds.AWS_DB_INSTANCE, age=timedelta(hours=3)),
        SampleResource("gcp-compute", crds.GCP_INSTANCE, age=timedelta(hours=2)),
        SampleResource("azure-storage", crds.AZURE_STORAGE_ACCOUNT),
    ]


SCENARIOS = {
    DEFAULT_SCENARIO: _default_scenario,
    "healthy": _healthy_scenario,
    "mixed-health": _mixed_health_scenario,
    "multi-cloud": _multi_cloud_scenario,
}


class SampleK8sClient(K8sClient):
    """K8s client that serves an embedded sample cluster instead of a real one."""

    def __init__(
        self,
        config: CrossplaneAIConfig | None = None,
        scenario: str = DEFAULT_SCENARIO,
        resources: list[SampleResource] | None = None,
    ) -> None:
        """Initialize from a named scenario or an explicit resource list.

        Raises:
            ValueError: If the scenario name is not known.
        """
        super().__init__(config)
        if resources is None:
            if scenario not in SCENARIOS:
                raise ValueError(
                    f"Unknown sample scenario '{scenario}'. Available: {', '.join(SCENARIOS)}"
                )
            resources = SCENARIOS[scenario]()
        self._resources = resources
        self._connected = False

    @property
    def is_connected(self) -> bool:
        return self._connected

    def connect(self) -> None:
        """No-op connect."""
        self._connected = True
        logger.info(f"Using sample cluster ({len(self._resources)} resources)")

    def disconnect(self) -> None:
        """No-op disconnect."""
        self._connected = False

    def list_resources(self, crd: CRDDefinition, namespace: str | None = None) -> list[dict[str, Any]]:
        """Return the sample objects of one kind."""
        now = datetime.now(timezone.utc)
        return [
            resource.to_object(now)
            for resource in self._resources
            if resource.crd == crd and (not namespace or resource.namespace == namespace)
        ]
