"""FastMCP server exposing the Crossplane assistant."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import Any

from mcp.server.fastmcp import FastMCP

from crossplane_ai.clients.base import K8sClient
from crossplane_ai.config import CrossplaneAIConfig, get_config
from crossplane_ai.domains.assistant import AssistantService
from crossplane_ai.domains.assistant import tools as assistant_tools
from crossplane_ai.domains.resources import ResourceClient, connect_cluster
from crossplane_ai.domains.resources import tools as resource_tools

logger = logging.getLogger(__name__)


class CrossplaneAIServer:
    """Crossplane AI MCP server."""

    def __init__(self, config: CrossplaneAIConfig | None = None) -> None:
        self._config = config or get_config()
        self._k8s_client: K8sClient | None = None
        self._resources: ResourceClient | None = None
        self._assistant = AssistantService(self._config)
        self._mcp: FastMCP | None = None

    @property
    def config(self) -> CrossplaneAIConfig:
        """Get server configuration."""
        return self._config

    @property
    def k8s(self) -> K8sClient:
        """Get the Kubernetes client.

        Raises:
            RuntimeError: If server is not running.
        """
        if self._k8s_client is None:
            raise RuntimeError("Server not running. K8s client not available.")
        return self._k8s_client

    @property
    def resources(self) -> ResourceClient:
        """Get the resource discovery client.

        Raises:
            RuntimeError: If server is not running.
        """
        if self._resources is None:
            raise RuntimeError("Server not running. Resource client not available.")
        return self._resources

    @property
    def assistant(self) -> AssistantService:
        return self._assistant

    @property
    def mcp(self) -> FastMCP:
        """Get the MCP server instance.

        Raises:
            RuntimeError: If server is not initialized.
        """
        if self._mcp is None:
            raise RuntimeError("Server not initialized.")
        return self._mcp

    def start(self) -> None:
        """Connect to the cluster and build the discovery client."""
        self._k8s_client = connect_cluster(self._config)
        self._resources = ResourceClient.from_config(self._k8s_client, self._config)

    def stop(self) -> None:
        """Disconnect from the cluster."""
        if self._k8s_client is not None:
            self._k8s_client.disconnect()
        self._k8s_client = None
        self._resources = None

    def _create_lifespan(self) -> Callable[[Any], AbstractAsyncContextManager[None]]:
        """Create the lifespan context manager for the MCP server."""
        server_self = self

        @asynccontextmanager
        async def lifespan(_app: Any) -> AsyncIterator[None]:
            """Connect to the cluster on startup, disconnect on shutdown."""
            logger.info("Starting Crossplane AI MCP server...")
            server_self.start()
            try:
                logger.info(
                    f"Crossplane AI MCP server started "
                    f"({len(server_self.resources.catalog)} resource kinds, "
                    f"completion service {'on' if server_self.assistant.uses_completion_service else 'off'})"
                )
                yield
            finally:
                logger.info("Shutting down Crossplane AI MCP server...")
                server_self.stop()

        return lifespan

    def create_mcp(self) -> FastMCP:
        """Create and configure the FastMCP server."""
        mcp = FastMCP(
            name="crossplane-ai",
            instructions="MCP server for Crossplane - query, analyze and generate "
            "Crossplane infrastructure resources across AWS, GCP and Azure.",
            lifespan=self._create_lifespan(),
            host=self._config.host,
            port=self._config.port,
        )
        self._mcp = mcp

        resource_tools.register_tools(mcp, self)
        resource_tools.register_resources(mcp, self)
        assistant_tools.register_tools(mcp, self)
        logger.debug("Registered Crossplane AI tools and resources")

        return mcp


def create_server(config: CrossplaneAIConfig | None = None) -> FastMCP:
    """Create the Crossplane AI MCP server."""
    server = CrossplaneAIServer(config)
    return server.create_mcp()
