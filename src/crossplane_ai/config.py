"""Configuration for Crossplane AI.

Settings are resolved in this order (later wins):

1. Field defaults below
2. The YAML config file (``~/.crossplane-ai.yaml`` or ``--config``)
3. Environment variables with the ``CROSSPLANE_AI_`` prefix, or the same
   names in a ``.env`` file in the working directory
4. Command line overrides
"""

from __future__ import annotations

import logging
import os
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from dotenv import dotenv_values
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from crossplane_ai.utils.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = Path.home() / ".crossplane-ai.yaml"

# Environment variable consulted when no API key is configured
OPENAI_API_KEY_ENV = "OPENAI_API_KEY"


class AIProvider(str, Enum):
    """Backend used to answer requests."""

    MOCK = "mock"
    OPENAI = "openai"


class OutputFormat(str, Enum):
    """Output rendering for CLI commands."""

    TABLE = "table"
    JSON = "json"
    YAML = "yaml"


class TransportMode(str, Enum):
    """MCP transport modes for the serve command."""

    STDIO = "stdio"
    SSE = "sse"
    STREAMABLE_HTTP = "streamable-http"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class CrossplaneAIConfig(BaseSettings):
    """Crossplane AI configuration.

    Loaded from environment variables with the CROSSPLANE_AI_ prefix,
    optionally seeded from a YAML file via :meth:`from_file`.
    """

    model_config = SettingsConfigDict(
        env_prefix="CROSSPLANE_AI_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Completion service
    ai_provider: AIProvider = Field(
        default=AIProvider.MOCK,
        description="Completion backend (mock uses templates only)",
    )
    ai_api_key: str = Field(
        default="",
        description="Bearer credential for the completion service",
    )
    ai_model: str = Field(default="gpt-4", description="Model identifier")
    ai_base_url: str = Field(
        default="https://api.openai.com/v1",
        description="Base URL of the chat-completions API",
    )
    ai_max_tokens: int = Field(default=1000, ge=1, description="Max tokens per completion")
    ai_temperature: float = Field(default=0.7, ge=0.0, le=2.0, description="Sampling temperature")

    # Kubernetes
    kubeconfig_path: str | None = Field(
        default=None,
        description="Path to kubeconfig file (default: ~/.kube/config)",
    )
    kubeconfig_context: str | None = Field(
        default=None,
        description="Kubeconfig context to use",
    )
    namespace: str | None = Field(
        default=None,
        description="Default namespace filter",
    )

    # Discovery allow-lists (empty means no restriction)
    providers: list[str] = Field(
        default_factory=list,
        description="Cloud providers whose kinds are queried",
    )
    resource_types: list[str] = Field(
        default_factory=list,
        description="Resource plurals that are queried",
    )

    # CLI
    output_format: OutputFormat = Field(default=OutputFormat.TABLE, description="Output format")
    log_level: LogLevel = Field(default=LogLevel.WARNING, description="Logging level")

    # MCP server
    transport: TransportMode = Field(default=TransportMode.STDIO, description="MCP transport mode")
    host: str = Field(default="127.0.0.1", description="Host to bind HTTP transports to")
    port: int = Field(default=8000, ge=1, le=65535, description="Port to bind HTTP transports to")

    # Analysis
    request_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Timeout in seconds for cluster list calls and completion requests",
    )
    max_suggestions: int = Field(default=10, ge=1, description="Maximum suggestions shown")

    mode: str = Field(
        default="",
        description="Set to 'mock' to use the embedded sample cluster",
    )
    mock_scenario: str = Field(
        default="default",
        description="Sample cluster scenario used in mock mode",
    )

    @property
    def mock_mode(self) -> bool:
        """Whether the embedded sample cluster replaces the live cluster."""
        return self.mode.lower() == "mock"

    @property
    def effective_api_key(self) -> str:
        """Resolve the API key, expanding ``${VAR}`` and falling back to OPENAI_API_KEY."""
        key = self.ai_api_key
        if key.startswith("${") and key.endswith("}"):
            return os.environ.get(key[2:-1], "")
        if key:
            return key
        return os.environ.get(OPENAI_API_KEY_ENV, "")

    @property
    def use_completion_service(self) -> bool:
        """Whether the external completion service should be called."""
        if self.mock_mode:
            return False
        return self.ai_provider == AIProvider.OPENAI and bool(self.effective_api_key)

    @property
    def effective_kubeconfig(self) -> str:
        """Kubeconfig path, defaulting to ~/.kube/config."""
        if self.kubeconfig_path:
            return str(Path(self.kubeconfig_path).expanduser())
        return str(Path.home() / ".kube" / "config")

    @classmethod
    def from_file(cls, path: str | Path | None = None, **overrides: Any) -> CrossplaneAIConfig:
        """Build a config from a YAML file plus explicit overrides.

        A missing default file is not an error; a missing explicit file is.

        Args:
            path: Config file path, or None for ``~/.crossplane-ai.yaml``.
            **overrides: Field values that take precedence over everything.

        Raises:
            ConfigurationError: If the file cannot be read or parsed.
        """
        explicit = path is not None
        config_path = Path(path).expanduser() if path else DEFAULT_CONFIG_FILE

        file_values: dict[str, Any] = {}
        if config_path.is_file():
            try:
                data = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
            except (OSError, yaml.YAMLError) as e:
                raise ConfigurationError(f"failed to read config file {config_path}: {e}")
            if not isinstance(data, dict):
                raise ConfigurationError(f"config file {config_path} must contain a mapping")
            file_values = flatten_file_config(data)
            logger.debug(f"Using config file: {config_path}")
        elif explicit:
            raise ConfigurationError(f"config file not found: {config_path}")

        # Environment (and .env) wins over the file
        env_set = cls._fields_set_in_environment()
        kwargs = {k: v for k, v in file_values.items() if k not in env_set}
        kwargs.update({k: v for k, v in overrides.items() if v is not None})
        try:
            return cls(**kwargs)
        except ValidationError as e:
            raise ConfigurationError(f"invalid configuration: {e}")

    @classmethod
    def _fields_set_in_environment(cls) -> set[str]:
        """Field names given by a CROSSPLANE_AI_ variable or the dotenv file."""
        names = {key.upper() for key in os.environ}
        env_file = cls.model_config.get("env_file")
        if isinstance(env_file, (str, Path)) and Path(env_file).is_file():
            encoding = cls.model_config.get("env_file_encoding")
            names.update(key.upper() for key in dotenv_values(env_file, encoding=encoding))
        return {name for name in cls.model_fields if f"CROSSPLANE_AI_{name.upper()}" in names}


# Maps (section, key) in the YAML file to a config field
_FILE_KEYS: dict[tuple[str, str], str] = {
    ("ai", "provider"): "ai_provider",
    ("ai", "api_key"): "ai_api_key",
    ("ai", "model"): "ai_model",
    ("ai", "base_url"): "ai_base_url",
    ("ai", "max_tokens"): "ai_max_tokens",
    ("ai", "temperature"): "ai_temperature",
    ("kubernetes", "kubeconfig"): "kubeconfig_path",
    ("kubernetes", "context"): "kubeconfig_context",
    ("kubernetes", "namespace"): "namespace",
    ("crossplane", "providers"): "providers",
    ("crossplane", "resource_types"): "resource_types",
    ("cli", "output_format"): "output_format",
    ("analysis", "timeout"): "request_timeout",
    ("analysis", "max_suggestions"): "max_suggestions",
    ("mock", "scenario"): "mock_scenario",
}


def flatten_file_config(data: dict[str, Any]) -> dict[str, Any]:
    """Convert the sectioned YAML layout into flat config field values.

    Empty strings are dropped so they do not override defaults. Unknown
    sections and keys are ignored.
    """
    values: dict[str, Any] = {}
    for (section, key), field_name in _FILE_KEYS.items():
        section_data = data.get(section)
        if not isinstance(section_data, dict) or key not in section_data:
            continue
        value = section_data[key]
        if value is None or value == "":
            continue
        values[field_name] = value

    cli_section = data.get("cli")
    if isinstance(cli_section, dict) and cli_section.get("verbose"):
        values["log_level"] = LogLevel.DEBUG

    return values


# Global config instance
_config: CrossplaneAIConfig | None = None


def get_config() -> CrossplaneAIConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = CrossplaneAIConfig.from_file()
    return _config
