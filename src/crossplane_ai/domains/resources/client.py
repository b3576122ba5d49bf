"""Resource discovery across the Crossplane kind catalog."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import datetime
from typing import TYPE_CHECKING

from kubernetes.client import ApiException  # type: ignore[import-untyped]
from kubernetes.dynamic.exceptions import ResourceNotFoundError  # type: ignore[import-untyped]

from crossplane_ai.clients.base import K8sClient
from crossplane_ai.domains.resources.classifier import classify, infer_provider
from crossplane_ai.domains.resources.crds import PLATFORM_GROUPS, CrossplaneCRDs
from crossplane_ai.domains.resources.samples import SampleK8sClient
from crossplane_ai.models.common import ResourceRecord
from crossplane_ai.utils.errors import ConfigurationError, DiscoveryError

if TYPE_CHECKING:
    from crossplane_ai.clients.base import CRDDefinition
    from crossplane_ai.config import CrossplaneAIConfig

logger = logging.getLogger(__name__)


def _is_kind_missing(error: Exception) -> bool:
    """Whether an error means the kind is simply not installed."""
    if isinstance(error, ResourceNotFoundError):
        return True
    return isinstance(error, ApiException) and error.status == 404


def restrict_catalog(
    catalog: Sequence[CRDDefinition],
    providers: Sequence[str] | None = None,
    resource_types: Sequence[str] | None = None,
) -> list[CRDDefinition]:
    """Narrow a catalog by provider and resource-type allow-lists.

    Crossplane core kinds are always kept. Empty allow-lists mean no
    restriction. Catalog order is preserved.
    """
    allowed_providers = {p.lower() for p in providers or []}
    allowed_types = {t.lower() for t in resource_types or []}

    result = []
    for crd in catalog:
        if crd.group in PLATFORM_GROUPS:
            result.append(crd)
            continue
        if allowed_providers and infer_provider(crd.group) not in allowed_providers:
            continue
        if allowed_types and crd.plural not in allowed_types:
            continue
        result.append(crd)
    return result


class ResourceClient:
    """Client for discovering Crossplane resources.

    Queries every kind in the catalog sequentially and merges the
    classified results into one flat list.
    """

    def __init__(
        self,
        k8s: K8sClient,
        catalog: Sequence[CRDDefinition] | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize with a K8sClient and the kinds to query.

        Args:
            k8s: Connected Kubernetes client.
            catalog: Kinds to query, in order. Defaults to CrossplaneCRDs.all_crds().
            clock: Clock override for age computation.
        """
        self._k8s = k8s
        self._catalog = list(catalog) if catalog is not None else CrossplaneCRDs.all_crds()
        self._clock = clock

    @classmethod
    def from_config(cls, k8s: K8sClient, config: CrossplaneAIConfig) -> ResourceClient:
        """Create a client whose catalog honors the configured allow-lists."""
        catalog = restrict_catalog(
            CrossplaneCRDs.all_crds(),
            providers=config.providers,
            resource_types=config.resource_types,
        )
        return cls(k8s, catalog=catalog)

    @property
    def catalog(self) -> list[CRDDefinition]:
        """The kinds queried by list_all(), in order."""
        return list(self._catalog)

    def list_all(self) -> list[ResourceRecord]:
        """List resources of every kind in the catalog.

        A kind that fails to list (typically because its CRD is not
        installed) is skipped. Records come back in catalog order, then
        in API-response order within a kind.

        Returns:
            All discovered records.

        Raises:
            DiscoveryError: If every kind failed for a reason other than the
                kind being absent, meaning the API server could not be used.
        """
        records: list[ResourceRecord] = []
        failures: list[tuple[CRDDefinition, Exception]] = []

        for crd in self._catalog:
            try:
                records.extend(self._list_kind(crd))
            except Exception as e:
                logger.debug(f"Skipping {crd}: {e}")
                failures.append((crd, e))

        if self._catalog and len(failures) == len(self._catalog):
            if not any(_is_kind_missing(e) for _, e in failures):
                cause = failures[0][1]
                raise DiscoveryError(f"failed to list resources from the cluster: {cause}")

        logger.debug(
            f"Discovered {len(records)} resources across "
            f"{len(self._catalog) - len(failures)}/{len(self._catalog)} kinds"
        )
        return records

    def list_filtered(
        self,
        name: str | None = None,
        provider: str | None = None,
        namespace: str | None = None,
    ) -> list[ResourceRecord]:
        """List resources matching every given filter.

        Args:
            name: Exact resource name.
            provider: Exact inferred provider, e.g. "aws".
            namespace: Exact namespace.

        Returns:
            Matching records in list_all() order.
        """
        return [
            record
            for record in self.list_all()
            if (not name or record.name == name)
            and (not provider or record.provider == provider)
            and (not namespace or record.namespace == namespace)
        ]

    def list_providers(self) -> list[ResourceRecord]:
        """List installed Crossplane providers."""
        return self._list_kind(CrossplaneCRDs.PROVIDER)

    def list_compositions(self) -> list[ResourceRecord]:
        """List Crossplane compositions."""
        return self._list_kind(CrossplaneCRDs.COMPOSITION)

    def _list_kind(self, crd: CRDDefinition) -> list[ResourceRecord]:
        items = self._k8s.list_resources(crd)
        return [classify(item, crd, now=self._clock) for item in items]


def connect_cluster(config: CrossplaneAIConfig) -> K8sClient:
    """Build and connect the cluster client selected by the config.

    Mock mode serves the embedded sample cluster instead of a live one.

    Raises:
        ConfigurationError: If the client cannot be built or connected.
    """
    k8s: K8sClient
    if config.mock_mode:
        try:
            k8s = SampleK8sClient(config, scenario=config.mock_scenario)
        except ValueError as e:
            raise ConfigurationError(str(e))
    else:
        k8s = K8sClient(config)
    k8s.connect()
    return k8s
