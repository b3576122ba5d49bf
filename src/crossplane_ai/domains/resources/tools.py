"""MCP tools and resources for Crossplane resource discovery."""

from typing import TYPE_CHECKING, Any

from mcp.server.fastmcp import FastMCP

from crossplane_ai.utils.errors import CrossplaneAIError

if TYPE_CHECKING:
    from crossplane_ai.server import CrossplaneAIServer


def register_tools(mcp: FastMCP, server: "CrossplaneAIServer") -> None:
    """Register resource discovery tools with the MCP server."""

    @mcp.tool()
    def crossplane_list_resources(
        provider: str | None = None,
        namespace: str | None = None,
        name: str | None = None,
    ) -> dict[str, Any]:
        """List Crossplane resources in the cluster.

        Covers compositions, XRDs, providers, configurations and the
        managed resources of the AWS, GCP and Azure providers.

        Args:
            provider: Only resources of this provider (aws, gcp, azure, crossplane).
            namespace: Only resources in this namespace.
            name: Only resources with this exact name.

        Returns:
            Resource count and list of resource summaries.
        """
        try:
            records = server.resources.list_filtered(
                name=name,
                provider=provider,
                namespace=namespace,
            )
        except CrossplaneAIError as e:
            return {"error": "Failed to list resources", "message": e.message}

        return {
            "count": len(records),
            "resources": [r.to_summary_dict() for r in records],
        }


def register_resources(mcp: FastMCP, server: "CrossplaneAIServer") -> None:
    """Register cluster resources with the MCP server."""

    @mcp.resource("crossplane://cluster/resources")
    def cluster_resources() -> dict[str, Any]:
        """All Crossplane resources discovered in the cluster."""
        records = server.resources.list_all()
        return {
            "count": len(records),
            "resources": [r.to_summary_dict() for r in records],
        }

    @mcp.resource("crossplane://cluster/providers")
    def cluster_providers() -> dict[str, Any]:
        """Installed Crossplane providers and their readiness."""
        records = server.resources.list_providers()
        return {
            "count": len(records),
            "providers": [
                {
                    "name": r.name,
                    "status": r.status.value,
                    "package": r.raw_spec.get("package"),
                    "age": r.age,
                }
                for r in records
            ],
        }

    @mcp.resource("crossplane://cluster/compositions")
    def cluster_compositions() -> dict[str, Any]:
        """Crossplane compositions and the composite types they implement."""
        records = server.resources.list_compositions()
        return {
            "count": len(records),
            "compositions": [
                {
                    "name": r.name,
                    "composite_type": r.raw_spec.get("compositeTypeRef"),
                    "labels": r.labels,
                }
                for r in records
            ],
        }
