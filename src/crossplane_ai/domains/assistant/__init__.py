"""Assistant domain - request routing, templates and completion service."""

from crossplane_ai.domains.assistant.completion import CompletionClient
from crossplane_ai.domains.assistant.router import ROUTING_RULES, RoutingRule, route
from crossplane_ai.domains.assistant.service import AssistantService

__all__ = [
    "ROUTING_RULES",
    "AssistantService",
    "CompletionClient",
    "RoutingRule",
    "route",
]
