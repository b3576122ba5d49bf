"""MCP tools for the Crossplane assistant."""

from typing import TYPE_CHECKING, Any

from mcp.server.fastmcp import FastMCP

from crossplane_ai.utils.errors import CrossplaneAIError, ValidationError

if TYPE_CHECKING:
    from crossplane_ai.server import CrossplaneAIServer


def register_tools(mcp: FastMCP, server: "CrossplaneAIServer") -> None:
    """Register assistant tools with the MCP server."""

    @mcp.tool()
    def crossplane_ask(
        question: str,
        provider: str | None = None,
        namespace: str | None = None,
    ) -> dict[str, Any]:
        """Ask a natural-language question about Crossplane resources.

        Args:
            question: The question, e.g. "which resources are not ready?".
            provider: Restrict the resource context to one provider.
            namespace: Restrict the resource context to one namespace.

        Returns:
            The answer text.
        """
        try:
            records = server.resources.list_filtered(provider=provider, namespace=namespace)
            return {"question": question, "answer": server.assistant.ask(question, records)}
        except ValidationError as e:
            return {"error": "Invalid request", "message": e.message}
        except CrossplaneAIError as e:
            return {"error": "Failed to answer question", "message": e.message}

    @mcp.tool()
    def crossplane_analyze(
        name: str | None = None,
        provider: str | None = None,
        namespace: str | None = None,
        health_check: bool = False,
    ) -> dict[str, Any]:
        """Analyze the health of Crossplane resources.

        Returns counts, a 0-100 health score, one issue per resource that is
        not ready, and recommendations.

        Args:
            name: Analyze only the resource with this name.
            provider: Analyze only resources of this provider.
            namespace: Analyze only resources in this namespace.
            health_check: Also report resources without readiness information.
        """
        try:
            records = server.resources.list_filtered(
                name=name,
                provider=provider,
                namespace=namespace,
            )
            result = server.assistant.analyze(records, health_check=health_check)
        except CrossplaneAIError as e:
            return {"error": "Failed to analyze resources", "message": e.message}
        return result.model_dump(mode="json")

    @mcp.tool()
    def crossplane_suggest(
        category: str | None = None,
        limit: int | None = None,
    ) -> dict[str, Any]:
        """Suggest improvements for Crossplane infrastructure.

        Args:
            category: database, security, optimize, network, or omit for
                general suggestions.
            limit: Maximum number of suggestions.
        """
        try:
            records = server.resources.list_all()
            suggestions = server.assistant.suggest(
                category,
                records,
                limit=limit or server.config.max_suggestions,
            )
        except CrossplaneAIError as e:
            return {"error": "Failed to generate suggestions", "message": e.message}
        return {
            "category": category or "general",
            "suggestions": [s.model_dump(mode="json") for s in suggestions],
        }

    @mcp.tool()
    def crossplane_generate(description: str, provider: str | None = None) -> dict[str, Any]:
        """Generate a Crossplane manifest from a description.

        The manifest is returned as YAML text and is never applied to the
        cluster.

        Args:
            description: What to create, e.g. "postgres database".
            provider: aws, gcp or azure. Defaults to aws.
        """
        try:
            manifest = server.assistant.generate_manifest(description, provider)
        except ValidationError as e:
            return {"error": "Invalid request", "message": e.message}
        return {"description": description, "manifest": manifest}
