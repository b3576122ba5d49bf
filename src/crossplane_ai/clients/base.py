"""Kubernetes client wrapper used by all Crossplane AI domains."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from kubernetes import client as k8s_client  # type: ignore[import-untyped]
from kubernetes import config as k8s_config  # type: ignore[import-untyped]
from kubernetes.config.config_exception import ConfigException  # type: ignore[import-untyped]
from kubernetes.dynamic import DynamicClient  # type: ignore[import-untyped]

from crossplane_ai.utils.errors import ConfigurationError

if TYPE_CHECKING:
    from crossplane_ai.config import CrossplaneAIConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CRDDefinition:
    """Group/version/plural triple identifying a listable resource kind."""

    group: str
    version: str
    plural: str
    kind: str

    @property
    def api_version(self) -> str:
        """Full apiVersion string (group/version, or version for the core group)."""
        if not self.group:
            return self.version
        return f"{self.group}/{self.version}"

    def __str__(self) -> str:
        return f"{self.plural}.{self.group}/{self.version}"


class TimeoutApiClient(k8s_client.ApiClient):
    """ApiClient that applies a default timeout to every request.

    The dynamic client's discovery calls never pass ``_request_timeout``,
    and the REST layer then waits without limit. Calls that do pass a
    timeout keep their own.
    """

    def __init__(self, configuration: k8s_client.Configuration, request_timeout: float) -> None:
        super().__init__(configuration)
        self.request_timeout = request_timeout

    def call_api(self, *args: Any, **kwargs: Any) -> Any:
        if kwargs.get("_request_timeout") is None:
            kwargs["_request_timeout"] = self.request_timeout
        return super().call_api(*args, **kwargs)


class K8sClient:
    """Thin wrapper around the kubernetes dynamic client.

    Only read operations are exposed; Crossplane AI never writes to
    the cluster.
    """

    def __init__(self, config: CrossplaneAIConfig | None = None) -> None:
        if config is None:
            from crossplane_ai.config import get_config

            config = get_config()
        self._config = config
        self._api_client: k8s_client.ApiClient | None = None
        self._dynamic_client: DynamicClient | None = None

    @property
    def is_connected(self) -> bool:
        """Whether connect() has completed."""
        return self._dynamic_client is not None

    @property
    def dynamic(self) -> DynamicClient:
        """Get the dynamic client.

        Raises:
            RuntimeError: If the client is not connected.
        """
        if self._dynamic_client is None:
            raise RuntimeError("K8s client not connected. Call connect() first.")
        return self._dynamic_client

    def connect(self) -> None:
        """Load cluster credentials and build the dynamic client.

        Tries the configured kubeconfig (and context) first, then falls
        back to in-cluster service account credentials. API discovery and
        every later request are bounded by ``request_timeout``.

        Raises:
            ConfigurationError: If no usable credentials are found or the
                dynamic client cannot discover the API server in time.
        """
        kubeconfig = self._config.effective_kubeconfig
        context = self._config.kubeconfig_context
        configuration = k8s_client.Configuration()

        try:
            k8s_config.load_kube_config(
                config_file=kubeconfig,
                context=context,
                client_configuration=configuration,
            )
            logger.debug(f"Loaded kubeconfig from {kubeconfig} (context={context or 'current'})")
        except (ConfigException, OSError) as e:
            logger.debug(f"Kubeconfig unavailable ({e}), trying in-cluster config")
            try:
                k8s_config.load_incluster_config(client_configuration=configuration)
            except ConfigException as incluster_error:
                raise ConfigurationError(
                    f"failed to build kubeconfig: {e}; in-cluster: {incluster_error}"
                )

        # One attempt per request; the timeout bounds each attempt
        configuration.retries = 0
        self._api_client = TimeoutApiClient(configuration, self._config.request_timeout)

        try:
            self._dynamic_client = DynamicClient(self._api_client)
        except Exception as e:
            self._api_client.close()
            self._api_client = None
            raise ConfigurationError(f"failed to create dynamic client: {e}")

        logger.info("Connected to Kubernetes API server")

    def disconnect(self) -> None:
        """Release the underlying API client."""
        if self._api_client is not None:
            self._api_client.close()
        self._api_client = None
        self._dynamic_client = None

    def list_resources(self, crd: CRDDefinition, namespace: str | None = None) -> list[dict[str, Any]]:
        """List all objects of a kind as plain dicts.

        Args:
            crd: The kind to list.
            namespace: Restrict to one namespace (None lists across all).

        Returns:
            Raw objects in API-response order.

        Raises:
            kubernetes.dynamic.exceptions.ResourceNotFoundError: If the kind is
                not served by this cluster.
            kubernetes.client.ApiException: On API errors.
        """
        api = self.dynamic.resources.get(api_version=crd.api_version, kind=crd.kind)
        kwargs: dict[str, Any] = {"_request_timeout": self._config.request_timeout}
        if namespace:
            kwargs["namespace"] = namespace
        result = api.get(**kwargs)
        items = result.to_dict().get("items") or []
        return list(items)
