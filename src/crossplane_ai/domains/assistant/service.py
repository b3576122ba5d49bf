"""Assistant service: answers, analysis, suggestions and manifests.

Each operation prefers the completion service when one is configured and
falls back to the deterministic templates when it is not, or when the
call fails. Numbers in an analysis never come from the completion service.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError as PydanticValidationError

from crossplane_ai.domains.analysis import AnalysisResult, Priority, Suggestion, analyze
from crossplane_ai.domains.assistant import manifests, templates
from crossplane_ai.domains.assistant.completion import CompletionClient
from crossplane_ai.domains.assistant.router import route
from crossplane_ai.models.common import ResourceRecord
from crossplane_ai.utils.errors import CompletionError, ValidationError

if TYPE_CHECKING:
    from crossplane_ai.config import CrossplaneAIConfig

logger = logging.getLogger(__name__)

SUGGESTION_PROMPT = """As a Crossplane expert, analyze the following resources and provide \
specific {category} suggestions.

Resource Context:
{context}

Provide 3-5 actionable suggestions in JSON format as an array of objects with fields:
- title: Brief suggestion title
- description: Detailed explanation
- priority: High/Medium/Low
- category: The category of suggestion
- example: Optional YAML example if applicable

Focus on practical, implementable suggestions for Crossplane and Kubernetes infrastructure."""

ANALYSIS_PROMPT = """Summarize the health of the following Crossplane resources in one short \
paragraph for an operator. {focus}

Resource Context:
{context}

Computed figures: {healthy} of {total} ready, health score {score}%."""

MANIFEST_PROMPT = """Generate a Crossplane manifest for: {description}

Requirements:
- Use provider: {provider} (if specified, otherwise choose appropriate provider)
- Create valid Crossplane YAML
- Include metadata, spec, and appropriate labels
- Follow Crossplane best practices
- Include helpful comments

Please provide only the YAML manifest without additional explanations."""


def resource_context(records: Sequence[ResourceRecord]) -> str:
    """JSON snapshot of the records sent along with prompts."""
    return json.dumps([r.to_summary_dict() for r in records], indent=2)


def _strip_code_fence(text: str) -> str:
    stripped = text.strip()
    if stripped.startswith("```"):
        lines = stripped.splitlines()[1:]
        if lines and lines[-1].strip().startswith("```"):
            lines = lines[:-1]
        return "\n".join(lines).strip()
    return stripped


def _coerce_priority(value: Any) -> Priority:
    if isinstance(value, str):
        for priority in Priority:
            if priority.value.lower() == value.strip().lower():
                return priority
    return Priority.MEDIUM


def parse_suggestions(content: str, category: str) -> list[Suggestion]:
    """Parse completion output into suggestions.

    A JSON array of objects maps onto Suggestion fields. Anything else is
    kept verbatim as the description of a single suggestion.
    """
    try:
        data = json.loads(_strip_code_fence(content))
    except ValueError:
        data = None

    if isinstance(data, list) and data and all(isinstance(item, dict) for item in data):
        try:
            return [
                Suggestion(
                    title=str(item.get("title", "")),
                    description=str(item.get("description", "")),
                    priority=_coerce_priority(item.get("priority")),
                    category=str(item.get("category") or category),
                    example=item.get("example") or None,
                )
                for item in data
            ]
        except PydanticValidationError as e:
            logger.debug(f"Suggestion payload did not validate: {e}")

    return [
        Suggestion(
            title=f"AI Suggestion for {category}",
            description=content,
            priority=Priority.MEDIUM,
            category=category,
        )
    ]


class AssistantService:
    """Answers requests about a resource collection."""

    def __init__(
        self,
        config: CrossplaneAIConfig | None = None,
        completion: CompletionClient | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            config: Application configuration. Defaults to the global config.
            completion: Completion client. When omitted, one is built from
                the config if the completion service is enabled there.
        """
        if config is None:
            from crossplane_ai.config import get_config

            config = get_config()
        self._config = config

        if completion is None and config.use_completion_service:
            completion = CompletionClient.from_config(config)
        self._completion = completion

    @property
    def uses_completion_service(self) -> bool:
        """Whether requests go to the completion service first."""
        return self._completion is not None

    def _try_complete(self, prompt: str) -> str | None:
        if self._completion is None:
            return None
        try:
            return self._completion.complete(prompt)
        except CompletionError as e:
            logger.info(f"Completion service unavailable, using templates: {e}")
            return None

    def ask(self, question: str, records: Sequence[ResourceRecord]) -> str:
        """Answer a free-text question about the resources.

        Raises:
            ValidationError: If the question is blank.
        """
        if not question or not question.strip():
            raise ValidationError("question must not be empty", field="question")

        if self._completion is not None:
            try:
                return self._completion.complete_with_context(question, resource_context(records))
            except CompletionError as e:
                logger.info(f"Completion service unavailable, using templates: {e}")

        return route(question, records)

    def analyze(
        self,
        records: Sequence[ResourceRecord],
        health_check: bool = False,
    ) -> AnalysisResult:
        """Analyze resource health and attach a narrative summary."""
        result = analyze(records, health_check=health_check)
        issue_names = [issue.resource_name for issue in result.issues if issue.resource_name]

        summary = None
        if records:
            focus = "Focus on resource health and readiness." if health_check else ""
            summary = self._try_complete(
                ANALYSIS_PROMPT.format(
                    focus=focus,
                    context=resource_context(records),
                    healthy=result.healthy_count,
                    total=result.total_count,
                    score=result.health_score,
                )
            )
        if summary is None:
            summary = templates.analysis_summary(
                result.total_count, result.healthy_count, result.health_score, issue_names
            )

        return result.model_copy(update={"summary": summary.strip()})

    def suggest(
        self,
        category: str | None,
        records: Sequence[ResourceRecord],
        limit: int | None = None,
    ) -> list[Suggestion]:
        """Suggest improvements for a category of infrastructure.

        Args:
            category: database, security, optimize, network, or anything
                else for general suggestions.
            records: Resources the suggestions are based on.
            limit: Maximum number of suggestions returned.
        """
        label = (category or "general").strip() or "general"

        suggestions = None
        content = self._try_complete(
            SUGGESTION_PROMPT.format(category=label, context=resource_context(records))
        )
        if content is not None:
            suggestions = parse_suggestions(content, label)
        if suggestions is None:
            suggestions = templates.suggestion_table(category, records)

        if limit is not None and limit > 0:
            suggestions = suggestions[:limit]
        return suggestions

    def generate_manifest(self, description: str, provider: str | None = None) -> str:
        """Generate a Crossplane manifest from a description.

        Raises:
            ValidationError: If the description is blank.
        """
        if not description or not description.strip():
            raise ValidationError("description is required", field="description")

        content = self._try_complete(
            MANIFEST_PROMPT.format(description=description, provider=provider or "auto")
        )
        if content is not None:
            return _strip_code_fence(content) + "\n"

        return manifests.generate_template_manifest(description, provider)
