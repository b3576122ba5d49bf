"""Catalog of Crossplane resource kinds queried during discovery."""

from crossplane_ai.clients.base import CRDDefinition

# API groups owned by Crossplane itself rather than a cloud provider
PLATFORM_GROUPS = frozenset({"apiextensions.crossplane.io", "pkg.crossplane.io"})


class CrossplaneCRDs:
    """Crossplane core and common provider CRD definitions."""

    # Core Crossplane
    COMPOSITION = CRDDefinition(
        group="apiextensions.crossplane.io",
        version="v1",
        plural="compositions",
        kind="Composition",
    )
    COMPOSITE_RESOURCE_DEFINITION = CRDDefinition(
        group="apiextensions.crossplane.io",
        version="v1",
        plural="compositeresourcedefinitions",
        kind="CompositeResourceDefinition",
    )
    PROVIDER = CRDDefinition(
        group="pkg.crossplane.io",
        version="v1",
        plural="providers",
        kind="Provider",
    )
    CONFIGURATION = CRDDefinition(
        group="pkg.crossplane.io",
        version="v1",
        plural="configurations",
        kind="Configuration",
    )

    # AWS
    AWS_DB_INSTANCE = CRDDefinition(
        group="rds.aws.crossplane.io",
        version="v1alpha1",
        plural="dbinstances",
        kind="DBInstance",
    )
    AWS_INSTANCE = CRDDefinition(
        group="ec2.aws.crossplane.io",
        version="v1alpha1",
        plural="instances",
        kind="Instance",
    )
    AWS_BUCKET = CRDDefinition(
        group="s3.aws.crossplane.io",
        version="v1alpha1",
        plural="buckets",
        kind="Bucket",
    )
    AWS_EKS_CLUSTER = CRDDefinition(
        group="eks.aws.crossplane.io",
        version="v1alpha1",
        plural="clusters",
        kind="Cluster",
    )

    # GCP
    GCP_DATABASE_INSTANCE = CRDDefinition(
        group="sql.gcp.crossplane.io",
        version="v1alpha1",
        plural="databaseinstances",
        kind="DatabaseInstance",
    )
    GCP_INSTANCE = CRDDefinition(
        group="compute.gcp.crossplane.io",
        version="v1alpha1",
        plural="instances",
        kind="Instance",
    )
    GCP_BUCKET = CRDDefinition(
        group="storage.gcp.crossplane.io",
        version="v1alpha1",
        plural="buckets",
        kind="Bucket",
    )

    # Azure
    AZURE_SQL_SERVER = CRDDefinition(
        group="sql.azure.crossplane.io",
        version="v1alpha1",
        plural="servers",
        kind="Server",
    )
    AZURE_VIRTUAL_MACHINE = CRDDefinition(
        group="compute.azure.crossplane.io",
        version="v1alpha1",
        plural="virtualmachines",
        kind="VirtualMachine",
    )
    AZURE_STORAGE_ACCOUNT = CRDDefinition(
        group="storage.azure.crossplane.io",
        version="v1alpha1",
        plural="accounts",
        kind="Account",
    )

    @classmethod
    def core_crds(cls) -> list[CRDDefinition]:
        """Return the Crossplane core CRD definitions."""
        return [
            cls.COMPOSITION,
            cls.COMPOSITE_RESOURCE_DEFINITION,
            cls.PROVIDER,
            cls.CONFIGURATION,
        ]

    @classmethod
    def all_crds(cls) -> list[CRDDefinition]:
        """Return all CRD definitions in discovery order."""
        return [
            *cls.core_crds(),
            cls.AWS_DB_INSTANCE,
            cls.AWS_INSTANCE,
            cls.AWS_BUCKET,
            cls.AWS_EKS_CLUSTER,
            cls.GCP_DATABASE_INSTANCE,
            cls.GCP_INSTANCE,
            cls.GCP_BUCKET,
            cls.AZURE_SQL_SERVER,
            cls.AZURE_VIRTUAL_MACHINE,
            cls.AZURE_STORAGE_ACCOUNT,
        ]
