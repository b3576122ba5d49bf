"""Tests for configuration loading."""

from pathlib import Path

import pytest

from crossplane_ai.config import (
    AIProvider,
    CrossplaneAIConfig,
    LogLevel,
    OutputFormat,
    TransportMode,
    flatten_file_config,
    get_config,
)
from crossplane_ai.utils.errors import ConfigurationError

CONFIG_YAML = """\
ai:
  provider: openai
  api_key: sk-file
  model: gpt-4o
  base_url: http://localhost:8080/v1
kubernetes:
  kubeconfig: ~/clusters/dev.yaml
  context: dev
  namespace: crossplane-system
crossplane:
  providers: [aws, gcp]
  resource_types: []
cli:
  output_format: json
  verbose: true
analysis:
  timeout: 12
  max_suggestions: 3
mock:
  scenario: multi-cloud
"""


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "crossplane-ai.yaml"
    path.write_text(CONFIG_YAML)
    return path


class TestDefaults:
    """Test default configuration values."""

    def test_defaults(self, config: CrossplaneAIConfig) -> None:
        assert config.ai_provider == AIProvider.MOCK
        assert config.ai_model == "gpt-4"
        assert config.ai_base_url == "https://api.openai.com/v1"
        assert config.request_timeout == 30.0
        assert config.max_suggestions == 10
        assert config.output_format == OutputFormat.TABLE
        assert config.log_level == LogLevel.WARNING
        assert config.transport == TransportMode.STDIO
        assert config.providers == []
        assert not config.mock_mode
        assert not config.use_completion_service

    def test_effective_kubeconfig_default(self, config: CrossplaneAIConfig) -> None:
        assert config.effective_kubeconfig == str(Path.home() / ".kube" / "config")

    def test_effective_kubeconfig_expands_user(self) -> None:
        config = CrossplaneAIConfig(_env_file=None, kubeconfig_path="~/kc")
        assert config.effective_kubeconfig == str(Path.home() / "kc")


class TestFromFile:
    """Test loading from the YAML config file."""

    def test_file_values(self, config_file: Path) -> None:
        config = CrossplaneAIConfig.from_file(config_file)

        assert config.ai_provider == AIProvider.OPENAI
        assert config.ai_api_key == "sk-file"
        assert config.ai_model == "gpt-4o"
        assert config.ai_base_url == "http://localhost:8080/v1"
        assert config.kubeconfig_path == "~/clusters/dev.yaml"
        assert config.kubeconfig_context == "dev"
        assert config.namespace == "crossplane-system"
        assert config.providers == ["aws", "gcp"]
        assert config.resource_types == []
        assert config.output_format == OutputFormat.JSON
        assert config.log_level == LogLevel.DEBUG
        assert config.request_timeout == 12
        assert config.max_suggestions == 3
        assert config.mock_scenario == "multi-cloud"
        assert config.use_completion_service

    def test_env_beats_file(self, config_file: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CROSSPLANE_AI_AI_MODEL", "gpt-env")

        config = CrossplaneAIConfig.from_file(config_file)

        assert config.ai_model == "gpt-env"
        assert config.ai_api_key == "sk-file"

    def test_dotenv_beats_file(
        self, config_file: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test values from a .env file outrank the YAML file like real env vars."""
        workdir = tmp_path / "work"
        workdir.mkdir()
        (workdir / ".env").write_text("CROSSPLANE_AI_AI_MODEL=gpt-dotenv\n", encoding="utf-8")
        monkeypatch.chdir(workdir)

        config = CrossplaneAIConfig.from_file(config_file)

        assert config.ai_model == "gpt-dotenv"
        assert config.ai_api_key == "sk-file"

    def test_overrides_beat_env_and_file(self, config_file: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CROSSPLANE_AI_KUBECONFIG_CONTEXT", "env-ctx")

        config = CrossplaneAIConfig.from_file(config_file, kubeconfig_context="cli-ctx", namespace=None)

        assert config.kubeconfig_context == "cli-ctx"
        assert config.namespace == "crossplane-system"

    def test_missing_default_file_is_fine(self) -> None:
        config = CrossplaneAIConfig.from_file()
        assert config.ai_provider == AIProvider.MOCK

    def test_missing_explicit_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="config file not found"):
            CrossplaneAIConfig.from_file(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("ai: [unclosed\n")

        with pytest.raises(ConfigurationError, match="failed to read config file"):
            CrossplaneAIConfig.from_file(path)

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ConfigurationError, match="must contain a mapping"):
            CrossplaneAIConfig.from_file(path)

    def test_invalid_value(self, tmp_path: Path) -> None:
        path = tmp_path / "invalid.yaml"
        path.write_text("ai:\n  max_tokens: 0\n")

        with pytest.raises(ConfigurationError, match="invalid configuration"):
            CrossplaneAIConfig.from_file(path)

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert CrossplaneAIConfig.from_file(path).ai_model == "gpt-4"


class TestFlattenFileConfig:
    """Test the sectioned file layout mapping."""

    def test_empty_strings_dropped(self) -> None:
        assert flatten_file_config({"ai": {"api_key": "", "model": "m"}}) == {"ai_model": "m"}

    def test_unknown_sections_ignored(self) -> None:
        assert flatten_file_config({"extra": {"x": 1}, "ai": "not-a-section"}) == {}


class TestApiKey:
    """Test API key resolution."""

    def test_explicit_key(self) -> None:
        config = CrossplaneAIConfig(_env_file=None, ai_api_key="sk-direct")
        assert config.effective_api_key == "sk-direct"

    def test_variable_reference(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MY_LLM_KEY", "sk-from-var")
        config = CrossplaneAIConfig(_env_file=None, ai_api_key="${MY_LLM_KEY}")

        assert config.effective_api_key == "sk-from-var"

    def test_unset_variable_reference(self) -> None:
        config = CrossplaneAIConfig(_env_file=None, ai_api_key="${SURELY_NOT_SET_ANYWHERE}")
        assert config.effective_api_key == ""

    def test_openai_env_fallback(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OPENAI_API_KEY", "sk-openai")
        config = CrossplaneAIConfig(_env_file=None)

        assert config.effective_api_key == "sk-openai"


class TestUseCompletionService:
    """Test when the completion service is used."""

    def test_openai_with_key(self) -> None:
        config = CrossplaneAIConfig(_env_file=None, ai_provider="openai", ai_api_key="sk-x")
        assert config.use_completion_service

    def test_openai_without_key(self) -> None:
        config = CrossplaneAIConfig(_env_file=None, ai_provider="openai")
        assert not config.use_completion_service

    def test_mock_provider_with_key(self) -> None:
        config = CrossplaneAIConfig(_env_file=None, ai_api_key="sk-x")
        assert not config.use_completion_service

    def test_mock_mode_forces_templates(self) -> None:
        config = CrossplaneAIConfig(_env_file=None, ai_provider="openai", ai_api_key="sk-x", mode="MOCK")
        assert config.mock_mode
        assert not config.use_completion_service


class TestEnvironment:
    """Test environment variable configuration."""

    def test_env_prefix(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CROSSPLANE_AI_MODE", "mock")
        monkeypatch.setenv("CROSSPLANE_AI_PORT", "9000")

        config = CrossplaneAIConfig(_env_file=None)

        assert config.mock_mode
        assert config.port == 9000

    def test_get_config_is_cached(self) -> None:
        assert get_config() is get_config()
