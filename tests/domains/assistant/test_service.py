"""Tests for AssistantService."""

import json
import logging
from unittest.mock import MagicMock

import httpx
import pytest
import yaml

from crossplane_ai.config import CrossplaneAIConfig
from crossplane_ai.domains.analysis import Priority
from crossplane_ai.domains.assistant.completion import CompletionClient
from crossplane_ai.domains.assistant.service import AssistantService, parse_suggestions
from crossplane_ai.models.common import ResourceStatus
from crossplane_ai.utils.errors import CompletionError, ValidationError


@pytest.fixture
def records(make_record) -> list:
    records = [make_record(f"res-{i}") for i in range(4)]
    records.append(make_record("broken", status=ResourceStatus.NOT_READY))
    return records


@pytest.fixture
def mock_completion() -> MagicMock:
    """Create a mock CompletionClient."""
    return MagicMock(spec=CompletionClient)


class TestConstruction:
    """Test completion client selection."""

    def test_templates_only_by_default(self, config: CrossplaneAIConfig) -> None:
        assert not AssistantService(config).uses_completion_service

    def test_completion_enabled_from_config(self) -> None:
        config = CrossplaneAIConfig(_env_file=None, ai_provider="openai", ai_api_key="sk-x")
        assert AssistantService(config).uses_completion_service

    def test_mock_mode_disables_completion(self) -> None:
        config = CrossplaneAIConfig(
            _env_file=None, ai_provider="openai", ai_api_key="sk-x", mode="mock"
        )
        assert not AssistantService(config).uses_completion_service


class TestAsk:
    """Test free-text questions."""

    def test_templates_when_not_configured(self, config, records) -> None:
        answer = AssistantService(config).ask("What resources do I have?", records)
        assert answer.startswith("Resource Summary:")

    @pytest.mark.parametrize("question", ["", "   "])
    def test_blank_question(self, config, records, question: str) -> None:
        with pytest.raises(ValidationError) as exc_info:
            AssistantService(config).ask(question, records)
        assert exc_info.value.field == "question"

    def test_completion_answer(self, config, records, mock_completion: MagicMock) -> None:
        mock_completion.complete_with_context.return_value = "It's all fine."
        service = AssistantService(config, completion=mock_completion)

        answer = service.ask("how is broken?", records)

        assert answer == "It's all fine."
        question, context = mock_completion.complete_with_context.call_args.args
        assert question == "how is broken?"
        assert [r["name"] for r in json.loads(context)] == [r.name for r in records]

    def test_completion_failure_falls_back(
        self, config, records, mock_completion: MagicMock, caplog: pytest.LogCaptureFixture
    ) -> None:
        mock_completion.complete_with_context.side_effect = CompletionError("boom", status_code=500)
        service = AssistantService(config, completion=mock_completion)

        with caplog.at_level(logging.INFO, logger="crossplane_ai.domains.assistant.service"):
            answer = service.ask("what resources", records)

        assert answer.startswith("Resource Summary:")
        assert "using templates" in caplog.text

    def test_http_error_falls_back_to_same_template(self, config, records) -> None:
        """Test a non-200 from the completion service yields the template answer."""
        transport = httpx.MockTransport(lambda request: httpx.Response(503, text="unavailable"))
        completion = CompletionClient(api_key="sk-x", transport=transport)

        with_service = AssistantService(config, completion=completion)
        without_service = AssistantService(config)

        question = "which resources failed?"
        assert with_service.ask(question, records) == without_service.ask(question, records)


class TestAnalyze:
    """Test analysis with narrative summary."""

    def test_template_summary(self, config, records) -> None:
        result = AssistantService(config).analyze(records)

        assert result.health_score == 80
        assert result.summary == (
            "4 of 5 resources are ready (health score 80%). Resources needing attention: broken."
        )

    def test_completion_summary_does_not_change_numbers(
        self, config, records, mock_completion: MagicMock
    ) -> None:
        mock_completion.complete.return_value = "  Mostly healthy, one broken.  "
        service = AssistantService(config, completion=mock_completion)

        result = service.analyze(records, health_check=True)

        assert result.summary == "Mostly healthy, one broken."
        assert (result.total_count, result.healthy_count, result.health_score) == (5, 4, 80)
        prompt = mock_completion.complete.call_args.args[0]
        assert "4 of 5 ready" in prompt
        assert "Focus on resource health" in prompt

    def test_empty_records_skip_completion(self, config, mock_completion: MagicMock) -> None:
        result = AssistantService(config, completion=mock_completion).analyze([])

        assert result.summary == "No Crossplane resources found in the cluster."
        mock_completion.complete.assert_not_called()


class TestSuggest:
    """Test suggestions."""

    def test_template_suggestions(self, config, records) -> None:
        suggestions = AssistantService(config).suggest("security", records)
        assert [s.title for s in suggestions][0] == "Enable Encryption at Rest"

    def test_limit(self, config, records) -> None:
        suggestions = AssistantService(config).suggest(None, records, limit=2)
        assert len(suggestions) == 2

    def test_json_completion(self, config, records, mock_completion: MagicMock) -> None:
        mock_completion.complete.return_value = json.dumps(
            [
                {"title": "Tag everything", "description": "Add cost tags", "priority": "high"},
                {"title": "Rotate keys", "description": "Rotate credentials", "category": "Security"},
            ]
        )
        service = AssistantService(config, completion=mock_completion)

        suggestions = service.suggest("security", records)

        assert [s.title for s in suggestions] == ["Tag everything", "Rotate keys"]
        assert suggestions[0].priority == Priority.HIGH
        assert suggestions[0].category == "security"
        assert suggestions[1].priority == Priority.MEDIUM
        assert suggestions[1].category == "Security"

    def test_non_json_completion(self, config, records, mock_completion: MagicMock) -> None:
        mock_completion.complete.return_value = "Use encryption everywhere."
        service = AssistantService(config, completion=mock_completion)

        suggestions = service.suggest("security", records)

        assert len(suggestions) == 1
        assert suggestions[0].title == "AI Suggestion for security"
        assert suggestions[0].description == "Use encryption everywhere."

    def test_completion_failure_uses_table(
        self, config, records, mock_completion: MagicMock
    ) -> None:
        mock_completion.complete.side_effect = CompletionError("down")
        service = AssistantService(config, completion=mock_completion)

        suggestions = service.suggest("db", records)

        assert suggestions[0].title.startswith("Enable Automated Backups")


class TestParseSuggestions:
    """Test parsing completion output into suggestions."""

    def test_fenced_json(self) -> None:
        content = '```json\n[{"title": "A", "description": "B", "priority": "Low"}]\n```'

        suggestions = parse_suggestions(content, "general")

        assert suggestions[0].title == "A"
        assert suggestions[0].priority == Priority.LOW

    @pytest.mark.parametrize("content", ["[]", '{"title": "x"}', "[1, 2]", "not json"])
    def test_fallback_single_suggestion(self, content: str) -> None:
        suggestions = parse_suggestions(content, "general")

        assert len(suggestions) == 1
        assert suggestions[0].description == content


class TestGenerateManifest:
    """Test manifest generation."""

    def test_template_manifest(self, config) -> None:
        manifest = AssistantService(config).generate_manifest("postgres database", "aws")

        docs = [d for d in yaml.safe_load_all(manifest) if d]
        assert docs[0]["kind"] == "DBInstance"
        assert docs[0]["spec"]["forProvider"]["engine"] == "postgres"

    @pytest.mark.parametrize("description", ["", "  "])
    def test_blank_description(self, config, description: str) -> None:
        with pytest.raises(ValidationError) as exc_info:
            AssistantService(config).generate_manifest(description)
        assert exc_info.value.field == "description"

    def test_completion_manifest_strips_fence(self, config, mock_completion: MagicMock) -> None:
        mock_completion.complete.return_value = "```yaml\napiVersion: v1\nkind: ConfigMap\n```"
        service = AssistantService(config, completion=mock_completion)

        manifest = service.generate_manifest("a config map")

        assert manifest == "apiVersion: v1\nkind: ConfigMap\n"
