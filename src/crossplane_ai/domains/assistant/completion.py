"""Client for an OpenAI-compatible chat-completions API."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx

from crossplane_ai.utils.errors import CompletionError

if TYPE_CHECKING:
    from crossplane_ai.config import CrossplaneAIConfig

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an expert Crossplane infrastructure assistant. Provide helpful, accurate, "
    "and actionable responses about Crossplane resources, Kubernetes, and cloud "
    "infrastructure. Keep responses concise but informative."
)

CONTEXT_PROMPT = """Context: You are analyzing Crossplane resources in a Kubernetes cluster.

Resource Information:
{context}

User Query: {query}

Please provide a helpful response based on the resource context. If the query is about \
specific resources, reference the actual resource names and statuses from the context."""


class CompletionClient:
    """Synchronous client for ``POST {base_url}/chat/completions``.

    Every failure mode surfaces as CompletionError so callers can fall back
    to deterministic output with a single except clause.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4",
        base_url: str = "https://api.openai.com/v1",
        timeout: float = 30.0,
        max_tokens: int = 1000,
        temperature: float = 0.7,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: Bearer credential.
            model: Model identifier sent with each request.
            base_url: API base URL, without the ``/chat/completions`` suffix.
            timeout: Request timeout in seconds.
            max_tokens: Completion length limit.
            temperature: Sampling temperature.
            transport: Optional httpx transport (used by tests).
        """
        self._api_key = api_key
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._transport = transport

    @classmethod
    def from_config(
        cls,
        config: CrossplaneAIConfig,
        transport: httpx.BaseTransport | None = None,
    ) -> CompletionClient:
        """Create a client from the application configuration."""
        return cls(
            api_key=config.effective_api_key,
            model=config.ai_model,
            base_url=config.ai_base_url,
            timeout=config.request_timeout,
            max_tokens=config.ai_max_tokens,
            temperature=config.ai_temperature,
            transport=transport,
        )

    @property
    def model(self) -> str:
        return self._model

    def complete(self, prompt: str) -> str:
        """Send one prompt and return the first choice's content.

        Raises:
            CompletionError: On transport error, timeout, non-2xx status,
                a body that is not JSON, or a missing message content.
        """
        payload: dict[str, Any] = {
            "model": self._model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            "max_tokens": self._max_tokens,
            "temperature": self._temperature,
        }
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                response = client.post(
                    f"{self._base_url}/chat/completions",
                    json=payload,
                    headers=headers,
                )
        except httpx.TimeoutException as e:
            raise CompletionError(f"completion request timed out: {e}")
        except httpx.HTTPError as e:
            raise CompletionError(f"failed to send completion request: {e}")

        if not response.is_success:
            raise CompletionError(
                f"completion request failed with status {response.status_code}: {response.text}",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise CompletionError(f"completion response is not JSON: {e}")

        try:
            content = body["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            raise CompletionError("no response choices returned")
        if not isinstance(content, str):
            raise CompletionError("completion response has no message content")

        logger.debug(f"Completion received from {self._model} ({len(content)} chars)")
        return content

    def complete_with_context(self, query: str, context: str) -> str:
        """Send a query together with a resource context snapshot."""
        return self.complete(CONTEXT_PROMPT.format(context=context, query=query))
