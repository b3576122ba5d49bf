"""Implementations of the crossplane-ai subcommands."""

from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass

from crossplane_ai.clients.base import K8sClient
from crossplane_ai.config import CrossplaneAIConfig, OutputFormat
from crossplane_ai.domains.assistant import AssistantService
from crossplane_ai.domains.assistant.examples import (
    DEFAULT_EXAMPLES_DIR,
    example_types,
    write_examples,
)
from crossplane_ai.domains.assistant.manifests import manifest_to_json
from crossplane_ai.domains.resources import ResourceClient, connect_cluster
from crossplane_ai.models.common import ResourceRecord
from crossplane_ai.utils.errors import ValidationError
from crossplane_ai.utils.formatting import (
    render_analysis,
    render_structured,
    render_suggestions,
)

logger = logging.getLogger(__name__)

# `generate examples` writes reference manifests instead of generating one
EXAMPLES_KEYWORD = "examples"


@dataclass
class Session:
    """Clients shared by the commands of one invocation."""

    config: CrossplaneAIConfig
    k8s: K8sClient
    resources: ResourceClient
    assistant: AssistantService

    @classmethod
    def open(cls, config: CrossplaneAIConfig) -> Session:
        """Connect to the cluster and build the service clients.

        Raises:
            ConfigurationError: If the cluster client cannot be initialized.
        """
        k8s = connect_cluster(config)
        return cls(
            config=config,
            k8s=k8s,
            resources=ResourceClient.from_config(k8s, config),
            assistant=AssistantService(config),
        )

    def close(self) -> None:
        self.k8s.disconnect()

    def discover(
        self,
        name: str | None = None,
        provider: str | None = None,
        namespace: str | None = None,
    ) -> list[ResourceRecord]:
        """Discover resources, applying the default namespace from config."""
        records = self.resources.list_filtered(
            name=name,
            provider=provider,
            namespace=namespace or self.config.namespace,
        )
        logger.debug(f"Using {len(records)} resources as context")
        return records


def output_format(args: argparse.Namespace, config: CrossplaneAIConfig) -> OutputFormat:
    """Resolve the --output flag against the configured default."""
    value = getattr(args, "output", None)
    return OutputFormat(value) if value else config.output_format


def _join_words(words: list[str] | None) -> str:
    return " ".join(words or []).strip()


def run_ask(args: argparse.Namespace, session: Session) -> int:
    """Answer a natural-language question about the cluster."""
    question = _join_words(args.question)
    if not question:
        raise ValidationError("a question is required", field="question")

    records = session.discover(provider=args.provider, namespace=args.namespace)
    answer = session.assistant.ask(question, records)

    fmt = output_format(args, session.config)
    if fmt == OutputFormat.TABLE:
        print(answer)
    else:
        print(render_structured({"question": question, "answer": answer}, fmt))
    return 0


def run_analyze(args: argparse.Namespace, session: Session) -> int:
    """Analyze resource health."""
    records = session.discover(
        name=args.name,
        provider=args.provider,
        namespace=args.namespace,
    )
    if args.name and not records:
        print(f"Resource '{args.name}' not found.")

    result = session.assistant.analyze(records, health_check=args.health_check)
    print(render_analysis(result, output_format(args, session.config), summary_only=args.summary))
    return 0


def run_suggest(args: argparse.Namespace, session: Session) -> int:
    """Suggest improvements for a category of infrastructure."""
    records = session.discover(provider=args.provider, namespace=args.namespace)
    limit = args.limit if args.limit is not None else session.config.max_suggestions
    suggestions = session.assistant.suggest(args.category, records, limit=limit)
    print(
        render_suggestions(
            suggestions,
            output_format(args, session.config),
            detailed=args.detailed,
        )
    )
    return 0


def run_generate(args: argparse.Namespace, assistant: AssistantService) -> int:
    """Generate a manifest from a description. No cluster access needed.

    ``generate examples`` writes the reference manifests instead.
    """
    description = _join_words(args.description)
    if description == EXAMPLES_KEYWORD:
        return run_examples(args)
    manifest = assistant.generate_manifest(description, args.provider)

    if args.output == "json":
        print(manifest_to_json(manifest))
    else:
        print(manifest.rstrip("\n"))
    return 0


def run_examples(args: argparse.Namespace) -> int:
    """List the example types or write them as YAML files."""
    if args.list:
        print("Available example types:")
        for name in example_types():
            print(f"  - {name}")
        return 0

    for path in write_examples(args.dir or DEFAULT_EXAMPLES_DIR):
        print(f"Created: {path}")
    return 0
