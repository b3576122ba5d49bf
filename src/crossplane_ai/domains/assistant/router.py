"""Keyword routing of free-text requests to response templates."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from crossplane_ai.domains.assistant import templates
from crossplane_ai.models.common import ResourceRecord

Handler = Callable[[str, Sequence[ResourceRecord]], str]


@dataclass(frozen=True)
class RoutingRule:
    """One routing rule.

    ``all_of`` is a list of keyword groups: the rule matches when, for every
    group, the lower-cased request contains at least one keyword of it.
    """

    name: str
    all_of: tuple[tuple[str, ...], ...]
    handler: Handler

    def matches(self, text: str) -> bool:
        return all(any(keyword in text for keyword in group) for group in self.all_of)


# First match wins
ROUTING_RULES: tuple[RoutingRule, ...] = (
    RoutingRule("summary", (("what",), ("resources",)), templates.summary_response),
    RoutingRule("aws", (("aws",),), templates.aws_response),
    RoutingRule("database", (("database", "db"),), templates.database_response),
    RoutingRule("troubleshooting", (("not ready", "failed"),), templates.troubleshooting_response),
    RoutingRule("cost", (("cost", "expensive"),), templates.cost_response),
)

FALLBACK_RULE = RoutingRule("generic", (), templates.generic_response)


def select_rule(
    request: str,
    rules: Sequence[RoutingRule] = ROUTING_RULES,
) -> RoutingRule:
    """Return the first rule matching the request, or the generic fallback."""
    text = request.lower()
    for rule in rules:
        if rule.matches(text):
            return rule
    return FALLBACK_RULE


def route(
    request: str,
    records: Sequence[ResourceRecord],
    rules: Sequence[RoutingRule] = ROUTING_RULES,
) -> str:
    """Answer a request from templates."""
    return select_rule(request, rules).handler(request, records)
