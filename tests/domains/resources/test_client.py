"""Tests for ResourceClient."""

from unittest.mock import MagicMock

import pytest
from kubernetes.client import ApiException
from kubernetes.dynamic.exceptions import ResourceNotFoundError

from crossplane_ai.clients.base import CRDDefinition
from crossplane_ai.config import CrossplaneAIConfig
from crossplane_ai.domains.resources.client import (
    ResourceClient,
    connect_cluster,
    restrict_catalog,
)
from crossplane_ai.domains.resources.crds import CrossplaneCRDs
from crossplane_ai.domains.resources.samples import SampleK8sClient
from crossplane_ai.models.common import ResourceStatus
from crossplane_ai.utils.errors import ConfigurationError, DiscoveryError

AWS_DB = CrossplaneCRDs.AWS_DB_INSTANCE
AWS_EC2 = CrossplaneCRDs.AWS_INSTANCE
GCP_SQL = CrossplaneCRDs.GCP_DATABASE_INSTANCE


def _by_kind(mapping: dict):
    """Build a list_resources side effect serving objects (or errors) per kind."""

    def _list(crd: CRDDefinition, namespace=None):
        value = mapping.get(crd, [])
        if isinstance(value, Exception):
            raise value
        return value

    return _list


class TestListAll:
    """Test merging resources across the catalog."""

    def test_catalog_order_then_response_order(self, mock_k8s: MagicMock, make_object) -> None:
        mock_k8s.list_resources.side_effect = _by_kind(
            {
                GCP_SQL: [make_object("gcp-1")],
                AWS_DB: [make_object("db-1"), make_object("db-2")],
            }
        )
        client = ResourceClient(mock_k8s, catalog=[AWS_DB, GCP_SQL])

        records = client.list_all()

        assert [r.name for r in records] == ["db-1", "db-2", "gcp-1"]
        assert [r.provider for r in records] == ["aws", "aws", "gcp"]

    def test_failing_kind_is_skipped(self, mock_k8s: MagicMock, make_object) -> None:
        """Test one failing kind does not affect the others."""
        mock_k8s.list_resources.side_effect = _by_kind(
            {
                AWS_DB: ApiException(status=500, reason="boom"),
                AWS_EC2: [make_object("web")],
                GCP_SQL: ResourceNotFoundError("no matches"),
            }
        )
        client = ResourceClient(mock_k8s, catalog=[AWS_DB, AWS_EC2, GCP_SQL])

        records = client.list_all()

        assert [r.name for r in records] == ["web"]

    def test_all_kinds_missing_is_empty(self, mock_k8s: MagicMock) -> None:
        """Test a cluster without Crossplane yields an empty collection."""
        mock_k8s.list_resources.side_effect = ResourceNotFoundError("no matches")
        client = ResourceClient(mock_k8s, catalog=[AWS_DB, AWS_EC2])

        assert client.list_all() == []

    def test_all_kinds_missing_404(self, mock_k8s: MagicMock) -> None:
        mock_k8s.list_resources.side_effect = ApiException(status=404, reason="Not Found")
        client = ResourceClient(mock_k8s, catalog=[AWS_DB])

        assert client.list_all() == []

    def test_all_kinds_unreachable_raises(self, mock_k8s: MagicMock) -> None:
        """Test total failure for non-404 reasons is a discovery error."""
        mock_k8s.list_resources.side_effect = ConnectionRefusedError("connection refused")
        client = ResourceClient(mock_k8s, catalog=[AWS_DB, AWS_EC2])

        with pytest.raises(DiscoveryError, match="connection refused"):
            client.list_all()

    def test_empty_catalog(self, mock_k8s: MagicMock) -> None:
        client = ResourceClient(mock_k8s, catalog=[])

        assert client.list_all() == []
        mock_k8s.list_resources.assert_not_called()

    def test_default_catalog(self, mock_k8s: MagicMock) -> None:
        client = ResourceClient(mock_k8s)

        client.list_all()

        assert mock_k8s.list_resources.call_count == 14
        assert client.catalog == CrossplaneCRDs.all_crds()

    def test_records_rebuilt_each_call(self, mock_k8s: MagicMock, make_object) -> None:
        """Test no caching: a second pass sees new API state."""
        mock_k8s.list_resources.return_value = [make_object("a", ready=False)]
        client = ResourceClient(mock_k8s, catalog=[AWS_DB])
        assert client.list_all()[0].status == ResourceStatus.NOT_READY

        mock_k8s.list_resources.return_value = [make_object("a", ready=True)]
        assert client.list_all()[0].status == ResourceStatus.READY


class TestListFiltered:
    """Test AND-ed equality filters."""

    @pytest.fixture
    def client(self, mock_k8s: MagicMock, make_object) -> ResourceClient:
        mock_k8s.list_resources.side_effect = _by_kind(
            {
                AWS_DB: [make_object("db", namespace="prod"), make_object("db", namespace="dev")],
                AWS_EC2: [make_object("web", namespace="prod")],
                GCP_SQL: [make_object("db", namespace="prod")],
            }
        )
        return ResourceClient(mock_k8s, catalog=[AWS_DB, AWS_EC2, GCP_SQL])

    def test_no_filters_returns_all(self, mock_k8s: MagicMock, make_object, fixed_clock) -> None:
        """Test the unfiltered listing is list_all() exactly, order included."""
        mock_k8s.list_resources.side_effect = _by_kind(
            {
                GCP_SQL: [make_object("zeta", namespace="prod"), make_object("beta", namespace="dev")],
                AWS_EC2: [make_object("web", namespace="prod")],
                AWS_DB: [make_object("alpha", namespace="prod", ready=False)],
            }
        )
        client = ResourceClient(mock_k8s, catalog=[GCP_SQL, AWS_EC2, AWS_DB], clock=fixed_clock)

        records = client.list_filtered()

        assert records == client.list_all()
        assert [(r.name, r.kind) for r in records] == [
            ("zeta", "databaseinstances"),
            ("beta", "databaseinstances"),
            ("web", "instances"),
            ("alpha", "dbinstances"),
        ]

    def test_empty_strings_mean_no_constraint(self, client: ResourceClient) -> None:
        assert len(client.list_filtered(name="", provider="", namespace="")) == 4

    def test_filters_are_conjunctive(self, client: ResourceClient) -> None:
        records = client.list_filtered(name="db", provider="aws", namespace="prod")

        assert len(records) == 1
        assert records[0].kind == "dbinstances"
        assert records[0].namespace == "prod"

    def test_filter_by_provider_preserves_order(self, client: ResourceClient) -> None:
        records = client.list_filtered(provider="aws")
        assert [(r.name, r.namespace) for r in records] == [("db", "prod"), ("db", "dev"), ("web", "prod")]

    def test_filter_no_match(self, client: ResourceClient) -> None:
        assert client.list_filtered(provider="azure") == []


class TestSingleKindListings:
    """Test provider and composition listings."""

    def test_list_providers(self, mock_k8s: MagicMock, make_object) -> None:
        mock_k8s.list_resources.return_value = [make_object("provider-aws")]
        client = ResourceClient(mock_k8s)

        providers = client.list_providers()

        assert [p.name for p in providers] == ["provider-aws"]
        mock_k8s.list_resources.assert_called_once_with(CrossplaneCRDs.PROVIDER)

    def test_list_compositions(self, mock_k8s: MagicMock, make_object) -> None:
        mock_k8s.list_resources.return_value = [make_object("xdb")]
        client = ResourceClient(mock_k8s)

        compositions = client.list_compositions()

        assert compositions[0].kind == "compositions"
        mock_k8s.list_resources.assert_called_once_with(CrossplaneCRDs.COMPOSITION)


class TestRestrictCatalog:
    """Test allow-list narrowing of the catalog."""

    def test_no_restrictions(self) -> None:
        catalog = CrossplaneCRDs.all_crds()
        assert restrict_catalog(catalog) == catalog

    def test_provider_allow_list_keeps_core(self) -> None:
        result = restrict_catalog(CrossplaneCRDs.all_crds(), providers=["gcp"])

        assert result[:4] == CrossplaneCRDs.core_crds()
        assert {c.group.split(".")[1] for c in result[4:]} == {"gcp"}

    def test_resource_type_allow_list(self) -> None:
        result = restrict_catalog(CrossplaneCRDs.all_crds(), resource_types=["buckets"])

        assert result[4:] == [CrossplaneCRDs.AWS_BUCKET, CrossplaneCRDs.GCP_BUCKET]

    def test_both_allow_lists(self) -> None:
        result = restrict_catalog(
            CrossplaneCRDs.all_crds(),
            providers=["AWS"],
            resource_types=["buckets", "instances"],
        )
        assert result[4:] == [CrossplaneCRDs.AWS_INSTANCE, CrossplaneCRDs.AWS_BUCKET]

    def test_from_config(self, mock_k8s: MagicMock) -> None:
        config = CrossplaneAIConfig(_env_file=None, providers=["azure"])

        client = ResourceClient.from_config(mock_k8s, config)

        assert len(client.catalog) == 7


class TestConnectCluster:
    """Test cluster client selection."""

    def test_mock_mode_uses_samples(self) -> None:
        config = CrossplaneAIConfig(_env_file=None, mode="mock")

        k8s = connect_cluster(config)

        assert isinstance(k8s, SampleK8sClient)
        assert k8s.is_connected

    def test_unknown_scenario(self) -> None:
        config = CrossplaneAIConfig(_env_file=None, mode="mock", mock_scenario="nope")

        with pytest.raises(ConfigurationError, match="Unknown sample scenario"):
            connect_cluster(config)
